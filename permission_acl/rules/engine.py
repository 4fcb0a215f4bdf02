"""
Policy evaluation engine.
"""

import time
from typing import FrozenSet, Iterable, Optional

from ..filters import find_bypass
from ..policy import PolicyConfig
from ..resolvers import GroupResolver, ResourceResolver
from ..shared.config import AclSettings
from ..shared.errors import AccessLayerException, ConfigurationError, ResolutionError
from ..shared.logging import configure_logging, get_logger, subject_context
from ..shared.metrics import AclMetrics
from .matcher import RuleMatcher
from .models import Action, Request, Rule, Verdict
from .validator import RuleEntry, RuleValidator

DENIED_REASON = "permissionacl-denied"

# Read/edit of a missing resource is governed by these actions, tried in order.
CREATE_FALLBACK_ACTIONS = (Action.CREATE.value, Action.CREATEPAGE.value)
_FALLBACK_TRIGGERS = frozenset((Action.READ.value, Action.EDIT.value))


class PolicyEvaluator:
    """First-match-wins evaluator over an ordered policy list."""

    def __init__(
        self,
        groups: GroupResolver,
        resources: ResourceResolver,
        metrics: Optional[AclMetrics] = None,
        deny_reason: str = DENIED_REASON,
        validator: Optional[RuleValidator] = None,
        matcher: Optional[RuleMatcher] = None,
    ):
        self.logger = get_logger("permission_acl.engine")
        self.groups = groups
        self.resources = resources
        self.metrics = metrics
        self.deny_reason = deny_reason
        self.validator = validator or RuleValidator()
        self.matcher = matcher or RuleMatcher()

    @classmethod
    def from_settings(
        cls,
        settings: AclSettings,
        groups: GroupResolver,
        resources: ResourceResolver,
        metrics: Optional[AclMetrics] = None,
        **kwargs
    ) -> "PolicyEvaluator":
        """Create an evaluator from settings, configuring logging at ``settings.log_level``."""
        configure_logging("permission_acl", settings.log_level)
        return cls(groups, resources, metrics=metrics, deny_reason=settings.deny_reason, **kwargs)

    def evaluate(self, config: Optional[PolicyConfig], subject: str,
                 resource: str, action: str) -> Verdict:
        """Decide whether ``subject`` may perform ``action`` on ``resource``.

        Log events emitted during the call carry the subject.

        Raises:
            ConfigurationError: if an invalid rule or expression is reached.
        """
        start_time = time.time()
        with subject_context(subject):
            try:
                verdict = self._decide(config, subject, resource, action.lower())
            except ConfigurationError as e:
                self.logger.error(
                    "Policy configuration error",
                    resource=resource,
                    action=action,
                    error=e.message,
                    details=e.details
                )
                if self.metrics:
                    self.metrics.record_configuration_error()
                raise

        verdict = verdict.timed((time.time() - start_time) * 1000)
        if self.metrics:
            self.metrics.record_decision(verdict.allowed, verdict.decided_by)
            self.metrics.record_duration(verdict.evaluation_time_ms / 1000)
        return verdict

    def _decide(self, config: Optional[PolicyConfig], subject: str,
                identifier: str, action: str) -> Verdict:
        if config is None or not config.configured:
            self.logger.info("No policy configured, allowing", resource=identifier, action=action)
            return Verdict.allow("bypass:unconfigured", action)

        resource = self._resolve_resource(identifier)
        bypass = find_bypass(config, subject, resource, action)
        if bypass:
            self.logger.debug("Bypass applied", bypass=bypass, resource=identifier, action=action)
            return Verdict.allow(f"bypass:{bypass}", action)

        request = Request(
            subject=subject,
            groups=self._resolve_groups(subject),
            resource=resource,
            action=action,
        )

        rule = self._first_match(config.rules, request)
        if rule is not None:
            return self._rule_verdict(rule, request, "rule")

        if action in _FALLBACK_TRIGGERS and not resource.exists:
            for fallback in CREATE_FALLBACK_ACTIONS:
                rule = self._first_match(config.rules, request.with_action(fallback))
                if rule is not None and rule.allows:
                    return self._rule_verdict(rule, request.with_action(fallback), "create-fallback")

        self.logger.debug("No rule matched, implicit deny", resource=identifier, action=action)
        return Verdict.deny(self.deny_reason, "implicit-deny", action)

    def _resolve_resource(self, identifier: str):
        try:
            return self.resources.resolve(identifier)
        except AccessLayerException:
            raise
        except Exception as e:
            self.logger.error("Resource resolution failed", resource=identifier, error=str(e))
            raise ResolutionError("resources", str(e), {"resource": identifier}) from e

    def _resolve_groups(self, subject: str) -> FrozenSet[str]:
        try:
            return frozenset(g.lower() for g in self.groups.effective_groups(subject))
        except AccessLayerException:
            raise
        except Exception as e:
            self.logger.error("Group resolution failed", subject=subject, error=str(e))
            raise ResolutionError("groups", str(e), {"subject": subject}) from e

    def _first_match(self, rules: Iterable[RuleEntry], request: Request) -> Optional[Rule]:
        for index, entry in enumerate(rules):
            rule = self.validator.compile(entry, index)
            if self.matcher.applies(rule, request):
                return rule
        return None

    def _rule_verdict(self, rule: Rule, request: Request, decided_by: str) -> Verdict:
        self.logger.debug(
            "Rule matched",
            rule_index=rule.index,
            operation=rule.operation.value,
            resource=request.resource.identifier,
            action=request.action,
            decided_by=decided_by
        )
        if rule.allows:
            return Verdict.allow(decided_by, request.action, rule.index)
        return Verdict.deny(self.deny_reason, decided_by, request.action, rule.index)


def evaluate(config: Optional[PolicyConfig], subject: str, resource: str, action: str,
             groups: GroupResolver, resources: ResourceResolver) -> Verdict:
    """One-off evaluation without keeping an evaluator around."""
    return PolicyEvaluator(groups, resources).evaluate(config, subject, resource, action)
