"""
Interfaces to the host-side facts the engine consumes.

The engine never computes group memberships or page metadata itself: a
host supplies a ``GroupResolver`` and a ``ResourceResolver``. The
``InMemoryDirectory`` implements both over plain dictionaries and is
enough for tests and small embedded deployments.
"""

from typing import Dict, Iterable, Mapping, Optional, Protocol, Sequence, runtime_checkable

from .rules.models import ResourceInfo
from .shared.config import AclSettings
from .shared.logging import get_logger


@runtime_checkable
class GroupResolver(Protocol):
    """Resolves a subject into its effective (flattened) group set."""

    def effective_groups(self, subject: str) -> Iterable[str]:
        ...


@runtime_checkable
class ResourceResolver(Protocol):
    """Resolves a resource identifier into ``ResourceInfo``."""

    def resolve(self, identifier: str) -> ResourceInfo:
        ...


def strip_category_prefix(key: str, namespace_text: str = "Category") -> str:
    """Strip the category namespace prefix from a category page key.

    When the localised category namespace text itself contains a colon
    (for example ``Project:Category``), everything up to its last colon is
    dropped first. The remainder is cut after its first colon. Keys without
    a colon are returned unchanged.
    """
    pos = namespace_text.rfind(":")
    if pos >= 0:
        key = key[pos + 1:]
    _, sep, name = key.partition(":")
    return name if sep else key


class InMemoryDirectory:
    """Dictionary-backed group and resource resolver."""

    def __init__(
        self,
        members: Optional[Mapping[str, Iterable[str]]] = None,
        pages: Optional[Mapping[str, Mapping]] = None,
        implicit_groups: Sequence[str] = ("*", "user"),
        category_namespace: str = "Category",
    ):
        self.logger = get_logger("permission_acl.directory")
        self.implicit_groups = tuple(implicit_groups)
        self.category_namespace = category_namespace
        self.members: Dict[str, frozenset] = {}
        self.pages: Dict[str, ResourceInfo] = {}

        for subject, groups in (members or {}).items():
            self.add_member(subject, groups)
        for identifier, page in (pages or {}).items():
            self.add_page(identifier, **page)

    @classmethod
    def from_settings(
        cls,
        settings: AclSettings,
        members: Optional[Mapping[str, Iterable[str]]] = None,
        pages: Optional[Mapping[str, Mapping]] = None,
    ) -> "InMemoryDirectory":
        """Create a directory using the configured category namespace."""
        return cls(members, pages, category_namespace=settings.category_namespace)

    def add_member(self, subject: str, groups: Iterable[str]):
        """Register (or replace) a subject's explicit groups."""
        self.members[subject.lower()] = frozenset(groups)

    def add_page(
        self,
        identifier: str,
        namespace: int = 0,
        categories: Iterable[str] = (),
        exists: bool = True,
        exempt: bool = False,
    ):
        """Register a page; ``categories`` are raw keys such as ``Category:Foo``."""
        self.pages[identifier] = ResourceInfo(
            identifier=identifier,
            namespace_id=namespace,
            full_path=identifier,
            categories=frozenset(
                strip_category_prefix(key, self.category_namespace) for key in categories
            ),
            exists=exists,
            is_exempt=exempt,
        )

    def effective_groups(self, subject: str) -> Iterable[str]:
        explicit = self.members.get(subject.lower())
        if explicit is None:
            # Anonymous or unknown subjects only get the "*" group.
            return frozenset(self.implicit_groups[:1])
        return explicit | frozenset(self.implicit_groups)

    def resolve(self, identifier: str) -> ResourceInfo:
        info = self.pages.get(identifier)
        if info is None:
            self.logger.debug("Unknown resource resolved as missing page", resource=identifier)
            return ResourceInfo(identifier=identifier, full_path=identifier, exists=False)
        return info
