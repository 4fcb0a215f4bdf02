"""
Structural validation and compilation of policy rules.

Rules arrive as plain mappings (the already-parsed configuration). A rule
carries exactly one subject selector (``group`` or ``user``), exactly one
resource selector (``namespace``, ``page`` or ``category``), an ``action``,
an ``operation`` and optionally a ``mode``. Compilation resolves each
"string or list of strings" field into a ``Selector`` once, so matching
never has to inspect value types again.
"""

from typing import Any, Iterable, Mapping, Tuple, Union

from ..shared.errors import ConfigurationError
from ..shared.logging import get_logger
from .models import (
    WILDCARD, Action, Operation, MatchMode, SubjectKind, ResourceKind,
    Selector, Rule,
)

ACTIONS = frozenset(a.value for a in Action)
OPERATIONS = frozenset(o.value for o in Operation)
MODES = frozenset(m.value for m in MatchMode)

_SEQUENCE_TYPES = (list, tuple, set, frozenset)

RuleEntry = Union[Rule, Mapping[str, Any]]

logger = get_logger("permission_acl.validator")


def _present(rule: Mapping[str, Any], key: str) -> bool:
    return rule.get(key) is not None


def _is_scalar(value: Any, allow_int: bool = False) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        return True
    return allow_int and isinstance(value, int)


def _is_selector_value(value: Any, allow_int: bool = False) -> bool:
    if _is_scalar(value, allow_int):
        return True
    if isinstance(value, _SEQUENCE_TYPES):
        return all(_is_scalar(v, allow_int) for v in value)
    return False


class RuleValidator:
    """Checks rule well-formedness and compiles valid rules."""

    def validate(self, rule: Mapping[str, Any]) -> bool:
        """Return True if ``rule`` is structurally well formed."""
        if not isinstance(rule, Mapping):
            return False

        # Exactly one subject selector.
        subjects = [k for k in SubjectKind if _present(rule, k.value)]
        if len(subjects) != 1:
            return False

        # Exactly one resource selector.
        resources = [k for k in ResourceKind if _present(rule, k.value)]
        if len(resources) != 1:
            return False

        # Members of a set-valued action are not checked against the vocabulary.
        action = rule.get("action")
        if isinstance(action, str):
            if action.lower() not in ACTIONS:
                return False
        elif not _is_selector_value(action):
            return False

        operation = rule.get("operation")
        if not isinstance(operation, str) or operation.lower() not in OPERATIONS:
            return False

        if _present(rule, "mode"):
            mode = rule["mode"]
            if not isinstance(mode, str) or mode.lower() not in MODES:
                return False

        if not _is_selector_value(rule[subjects[0].value]):
            return False
        resource_kind = resources[0]
        return _is_selector_value(
            rule[resource_kind.value],
            allow_int=resource_kind is ResourceKind.NAMESPACE
        )

    def compile(self, rule: RuleEntry, index: int = -1) -> Rule:
        """Validate ``rule`` and resolve it into a ``Rule``.

        Raises:
            ConfigurationError: if the rule is malformed.
        """
        if isinstance(rule, Rule):
            return rule

        if not self.validate(rule):
            logger.error("Invalid rule", index=index, rule=repr(rule))
            raise ConfigurationError(
                f"Invalid rule at position {index}: {rule!r}",
                details={"index": index, "rule": repr(rule)}
            )

        mode = MatchMode(rule["mode"].lower()) if _present(rule, "mode") else MatchMode.SIMPLE
        subject_kind = SubjectKind.GROUP if _present(rule, "group") else SubjectKind.USER
        resource_kind = next(k for k in ResourceKind if _present(rule, k.value))

        return Rule(
            subject_kind=subject_kind,
            subject=self._subject_selector(subject_kind, rule[subject_kind.value]),
            resource_kind=resource_kind,
            resource=self._resource_selector(rule[resource_kind.value], mode),
            actions=_selector(rule["action"], wildcard=True).lowered(),
            operation=Operation(rule["operation"].lower()),
            mode=mode,
            index=index,
            source=dict(rule),
        )

    def compile_all(self, rules: Iterable[RuleEntry]) -> Tuple[Rule, ...]:
        """Compile a whole policy list, failing on the first invalid rule."""
        return tuple(self.compile(rule, index) for index, rule in enumerate(rules))

    def _subject_selector(self, kind: SubjectKind, value: Any) -> Selector:
        # "*" is "any user"; for groups it is a literal group name.
        return _selector(value, wildcard=kind is SubjectKind.USER).lowered()

    def _resource_selector(self, value: Any, mode: MatchMode) -> Selector:
        # In pcre mode every value is an expression, "*" included.
        return _selector(value, wildcard=mode is MatchMode.SIMPLE)


def _selector(value: Any, wildcard: bool) -> Selector:
    if isinstance(value, _SEQUENCE_TYPES):
        return Selector.of(value)
    if wildcard and value == WILDCARD:
        return Selector.wildcard()
    return Selector.scalar(value)
