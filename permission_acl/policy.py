"""
Explicit policy configuration handed to the evaluator on every call.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Tuple

from .rules.models import ResourceInfo
from .rules.validator import RuleEntry, RuleValidator
from .shared.config import AclSettings


ExemptPredicate = Callable[[ResourceInfo], bool]


@dataclass(frozen=True)
class PolicyConfig:
    """Policy list plus bypass lists.

    ``rules`` is ``None`` when no policy is configured at all (every request
    is then allowed); an empty tuple is a configured policy that denies
    everything. Instances are immutable: hosts build a new one on reload
    and swap the reference.
    """
    rules: Optional[Tuple[RuleEntry, ...]] = None
    superusers: Tuple[str, ...] = ()
    read_whitelist: Tuple[str, ...] = ()
    exempt: Optional[ExemptPredicate] = field(default=None, compare=False)

    def __post_init__(self):
        if self.rules is not None and not isinstance(self.rules, tuple):
            object.__setattr__(self, "rules", tuple(self.rules))
        object.__setattr__(self, "superusers", tuple(self.superusers))
        object.__setattr__(self, "read_whitelist", tuple(self.read_whitelist))

    @property
    def configured(self) -> bool:
        return self.rules is not None

    @classmethod
    def from_settings(cls, settings: AclSettings, **kwargs: Any) -> "PolicyConfig":
        """Build a configuration from ``AclSettings``."""
        return cls(
            rules=settings.permission_acl,
            superusers=settings.superusers,
            read_whitelist=settings.read_whitelist,
            **kwargs
        )

    def compiled(self, validator: Optional[RuleValidator] = None) -> "PolicyConfig":
        """Return a copy with every rule validated and compiled.

        Raises:
            ConfigurationError: on the first invalid rule.
        """
        if self.rules is None:
            return self
        validator = validator or RuleValidator()
        return replace(self, rules=validator.compile_all(self.rules))
