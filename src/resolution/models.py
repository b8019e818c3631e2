"""Effective (resolved) views of catalog entries for one platform version."""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from catalog.models import Link, Repository
from versioning.version import Version


class _Absent:
    """Outcome of resolving a dependency the platform version excludes."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "ABSENT"


ABSENT = _Absent()


@dataclass(frozen=True)
class EffectiveDependency:
    """Dependency with group defaults and the applicable mapping merged in."""
    id: str
    name: str
    description: Optional[str]
    group_id: str
    artifact_id: str
    version: Optional[str]
    scope: str
    bom: Optional[str]
    repositories: Tuple[str, ...]
    facets: Tuple[str, ...]
    aliases: Tuple[str, ...]
    keywords: Tuple[str, ...]
    links: Tuple[Link, ...]
    weight: int
    starter: bool
    version_range: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["links"] = [dict(link, templated="{" in link["href"]) for link in data["links"]]
        for key in ("repositories", "facets", "aliases", "keywords"):
            data[key] = list(data[key])
        return data


@dataclass(frozen=True)
class EffectiveBom:
    """BOM with the applicable mapping merged in."""
    id: str
    group_id: str
    artifact_id: str
    version: Optional[str]
    version_property: Optional[str]
    order: int
    repositories: Tuple[str, ...]
    additional_boms: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["repositories"] = list(self.repositories)
        data["additional_boms"] = list(self.additional_boms)
        return data


@dataclass(frozen=True)
class ResolvedRequest:
    """Final dependency set of a request with the BOMs and repositories it needs."""
    platform_version: Version
    dependencies: Tuple[EffectiveDependency, ...]
    boms: Tuple[EffectiveBom, ...]
    repositories: Tuple[Repository, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platform_version": str(self.platform_version),
            "dependencies": [dependency.to_dict() for dependency in self.dependencies],
            "boms": [bom.to_dict() for bom in self.boms],
            "repositories": [asdict(repository) for repository in self.repositories],
        }
