"""Declarative catalog model: repositories, BOMs, groups and dependencies."""

from dataclasses import dataclass, field, replace
from typing import List, Mapping as MappingType, Optional, Tuple

from versioning.range import VersionRange


@dataclass(frozen=True)
class Repository:
    """Artifact repository referenced by id from dependencies and BOMs."""
    id: str
    name: Optional[str] = None
    url: Optional[str] = None
    releases_enabled: bool = True
    snapshots_enabled: bool = False


@dataclass(frozen=True)
class Link:
    """Documentation or guide link attached to a dependency."""
    rel: str
    href: str
    description: Optional[str] = None

    @property
    def templated(self) -> bool:
        return "{" in self.href


@dataclass(frozen=True)
class MappingOverrides:
    """Fixed-shape partial coordinates; None means "keep the base value"."""
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None
    repository_ids: Optional[Tuple[str, ...]] = None
    bom_id: Optional[str] = None


@dataclass(frozen=True)
class Mapping:
    """Range-scoped override of an owner's coordinates.

    ``range_text`` is what the catalog declared: a full bracket range, a bare
    lower bound (upper bound implied by the next mapping) or None. The loader
    leaves ``version_range`` unset; validation fills it with the normalized
    interval.
    """
    range_text: Optional[str]
    overrides: MappingOverrides = field(default_factory=MappingOverrides)
    version_range: Optional[VersionRange] = None

    @property
    def is_implicit(self) -> bool:
        """True when the upper bound comes from the next mapping."""
        text = (self.range_text or "").strip()
        return not text or text[0] not in "[("

    def normalized(self, version_range: VersionRange) -> "Mapping":
        return replace(self, version_range=version_range)


@dataclass(frozen=True)
class Dependency:
    """Catalog dependency as declared, or materialized after group merging."""
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    version: Optional[str] = None
    version_range_text: Optional[str] = None
    bom: Optional[str] = None
    repository: Optional[str] = None
    scope: Optional[str] = None
    aliases: Tuple[str, ...] = ()
    facets: Tuple[str, ...] = ()
    weight: int = 0
    keywords: Tuple[str, ...] = ()
    links: Tuple[Link, ...] = ()
    starter: bool = True
    mappings: Tuple[Mapping, ...] = ()
    version_range: Optional[VersionRange] = None

    @property
    def display_name(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class Bom:
    """Bill of materials referenced by id."""
    id: str
    group_id: str
    artifact_id: str
    version: Optional[str] = None
    version_property: Optional[str] = None
    order: int = 2147483647
    repositories: Tuple[str, ...] = ()
    additional_boms: Tuple[str, ...] = ()
    mappings: Tuple[Mapping, ...] = ()

    @property
    def coordinates(self) -> Tuple[str, str]:
        return (self.group_id, self.artifact_id)


@dataclass(frozen=True)
class Group:
    """Named set of dependencies sharing defaults."""
    name: str
    version_range_text: Optional[str] = None
    bom: Optional[str] = None
    repository: Optional[str] = None
    group_id: Optional[str] = None
    content: Tuple[Dependency, ...] = ()


@dataclass(frozen=True)
class RawCatalog:
    """Pre-merge catalog structures as loaded from configuration."""
    groups: Tuple[Group, ...] = ()
    boms: Tuple[Bom, ...] = ()
    repositories: Tuple[Repository, ...] = ()
    facet_defaults: Tuple[Tuple[str, str], ...] = ()
    platform_group_id: Optional[str] = None


@dataclass(frozen=True)
class Catalog:
    """Validated, immutable catalog snapshot.

    Cross references stay string ids; the indexes below are built once when
    the snapshot reaches the valid state.
    """
    groups: Tuple[Group, ...]
    dependencies: MappingType[str, Dependency]
    aliases: MappingType[str, str]
    boms: MappingType[str, Bom]
    repositories: MappingType[str, Repository]
    facet_defaults: MappingType[str, str]
    platform_group_id: str

    def find_dependency(self, requested_id: str) -> Optional[Dependency]:
        """Lookup by primary id first, then by alias."""
        dependency = self.dependencies.get(requested_id)
        if dependency is not None:
            return dependency
        target = self.aliases.get(requested_id)
        if target is None:
            return None
        return self.dependencies[target]

    def all_dependencies(self) -> List[Dependency]:
        """Dependencies in declaration order."""
        return list(self.dependencies.values())
