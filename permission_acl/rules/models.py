"""
Rule data models for the permission ACL engine.
"""

from typing import Any, FrozenSet, Iterable, Mapping, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field


WILDCARD = "*"


class Action(str, Enum):
    """Action vocabulary accepted by single-valued rule actions."""
    READ = "read"
    EDIT = "edit"
    CREATE = "create"
    CREATEPAGE = "createpage"
    MOVE = "move"
    ANY = "*"


class Operation(str, Enum):
    """Rule operations. ``permit`` and ``allow`` are synonyms."""
    PERMIT = "permit"
    ALLOW = "allow"
    DENY = "deny"

    @property
    def grants(self) -> bool:
        return self is not Operation.DENY


class MatchMode(str, Enum):
    """How resource selector values are interpreted."""
    SIMPLE = "simple"
    PCRE = "pcre"


class SubjectKind(str, Enum):
    GROUP = "group"
    USER = "user"


class ResourceKind(str, Enum):
    NAMESPACE = "namespace"
    PAGE = "page"
    CATEGORY = "category"


class SelectorKind(str, Enum):
    SCALAR = "scalar"
    SET = "set"
    WILDCARD = "wildcard"


@dataclass(frozen=True)
class Selector:
    """A rule field resolved to ``Scalar | Set | Wildcard``.

    Values are kept as strings in their configured order; namespace numbers
    are stored in their decimal form.
    """
    kind: SelectorKind
    values: Tuple[str, ...] = ()

    @classmethod
    def scalar(cls, value: Any) -> "Selector":
        return cls(SelectorKind.SCALAR, (str(value),))

    @classmethod
    def of(cls, values: Iterable[Any]) -> "Selector":
        return cls(SelectorKind.SET, tuple(str(v) for v in values))

    @classmethod
    def wildcard(cls) -> "Selector":
        return cls(SelectorKind.WILDCARD)

    @property
    def is_wildcard(self) -> bool:
        return self.kind is SelectorKind.WILDCARD

    def lowered(self) -> "Selector":
        return Selector(self.kind, tuple(v.lower() for v in self.values))


@dataclass(frozen=True)
class Rule:
    """One compiled policy entry."""
    subject_kind: SubjectKind
    subject: Selector
    resource_kind: ResourceKind
    resource: Selector
    actions: Selector
    operation: Operation
    mode: MatchMode = MatchMode.SIMPLE
    index: int = -1
    source: Optional[Mapping[str, Any]] = field(default=None, compare=False, repr=False)

    @property
    def allows(self) -> bool:
        return self.operation.grants


@dataclass(frozen=True)
class ResourceInfo:
    """Resource facts supplied by the host's resource resolver."""
    identifier: str
    namespace_id: int = 0
    full_path: str = ""
    categories: FrozenSet[str] = frozenset()
    exists: bool = True
    is_exempt: bool = False


@dataclass(frozen=True)
class Request:
    """One evaluation request; built per call and then discarded."""
    subject: str
    groups: FrozenSet[str]
    resource: ResourceInfo
    action: str

    def with_action(self, action: str) -> "Request":
        return Request(self.subject, self.groups, self.resource, action)


class DecisionResponse(BaseModel):
    """Serialisable form of a verdict for hosts."""
    allowed: bool = Field(..., description="Whether the action is allowed")
    reason: Optional[str] = Field(None, description="Opaque denial message key")
    decided_by: str = Field(..., description="Which stage produced the verdict")
    matched_rule: Optional[int] = Field(None, description="Index of the deciding rule")
    action: str = Field(..., description="Action the verdict was decided for")


@dataclass(frozen=True)
class Verdict:
    """Result of a policy evaluation."""
    allowed: bool
    decided_by: str
    action: str
    reason: Optional[str] = None
    matched_rule: Optional[int] = None
    evaluation_time_ms: float = field(default=0.0, compare=False)

    @classmethod
    def allow(cls, decided_by: str, action: str, matched_rule: Optional[int] = None) -> "Verdict":
        return cls(allowed=True, decided_by=decided_by, action=action, matched_rule=matched_rule)

    @classmethod
    def deny(cls, reason: str, decided_by: str, action: str,
             matched_rule: Optional[int] = None) -> "Verdict":
        return cls(allowed=False, decided_by=decided_by, action=action,
                   reason=reason, matched_rule=matched_rule)

    def timed(self, evaluation_time_ms: float) -> "Verdict":
        return Verdict(self.allowed, self.decided_by, self.action, self.reason,
                       self.matched_rule, evaluation_time_ms)

    def to_response(self) -> DecisionResponse:
        return DecisionResponse(
            allowed=self.allowed,
            reason=self.reason,
            decided_by=self.decided_by,
            matched_rule=self.matched_rule,
            action=self.action
        )
