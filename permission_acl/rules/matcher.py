"""
Rule applicability checks.
"""

from typing import Any, Optional

from .models import Rule, Request, SubjectKind, ResourceKind
from .patterns import PatternMatcher


class RuleMatcher:
    """Decides whether one rule applies to a request."""

    def __init__(self, patterns: Optional[PatternMatcher] = None):
        self.patterns = patterns or PatternMatcher()

    def applies(self, rule: Rule, request: Request) -> bool:
        """Check subject, resource and action; all must hold."""
        return (
            self._subject_matches(rule, request)
            and self._resource_matches(rule, request)
            and self._action_matches(rule, request)
        )

    def _subject_matches(self, rule: Rule, request: Request) -> bool:
        if rule.subject_kind is SubjectKind.GROUP:
            return self.patterns.matches_any(rule.subject, request.groups, case_sensitive=False)
        return self.patterns.matches_any(rule.subject, request.subject, case_sensitive=False)

    def _resource_matches(self, rule: Rule, request: Request) -> bool:
        return self.patterns.matches_any(
            rule.resource,
            self._resource_candidates(rule.resource_kind, request),
            mode=rule.mode
        )

    def _action_matches(self, rule: Rule, request: Request) -> bool:
        return self.patterns.matches_any(rule.actions, request.action, case_sensitive=False)

    def _resource_candidates(self, kind: ResourceKind, request: Request) -> Any:
        resource = request.resource
        if kind is ResourceKind.NAMESPACE:
            return [resource.namespace_id]
        if kind is ResourceKind.PAGE:
            return [resource.full_path]
        return sorted(resource.categories)
