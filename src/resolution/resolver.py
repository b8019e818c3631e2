"""Metadata resolution against a validated catalog snapshot.

The resolver is stateless across calls: every method reads the snapshot it
was created with and builds new immutable effective records.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Union

from catalog.models import Bom, Catalog, Dependency, Mapping, RawCatalog, Repository
from catalog.validation import validate as validate_catalog
from common.logging_utils import extra_context, is_debug_enabled
from versioning.parser import VersionParser
from versioning.provider import VersionProvider
from versioning.range import VersionRange
from versioning.version import Version

from .models import ABSENT, EffectiveBom, EffectiveDependency, ResolvedRequest
from .search import rank_by_keyword, sort_by_weight

logger = logging.getLogger(__name__)

PlatformVersion = Union[str, Version]


class ResolutionError(LookupError):
    """A requested id cannot be resolved against the catalog."""

    def __init__(self, requested_id: str, message: str):
        super().__init__(message)
        self.requested_id = requested_id

    def __str__(self):
        return self.args[0]


class UnknownDependency(ResolutionError, KeyError):
    def __init__(self, requested_id: str):
        super().__init__(requested_id, f"Unknown dependency '{requested_id}'")


class UnknownBom(ResolutionError, KeyError):
    def __init__(self, requested_id: str):
        super().__init__(requested_id, f"Unknown bom '{requested_id}'")


class IncompatibleDependency(ResolutionError):
    def __init__(self, requested_id: str, platform_version: Version, version_range: Optional[str]):
        super().__init__(
            requested_id,
            f"Dependency '{requested_id}' is not available for platform version {platform_version} "
            f"(requires {version_range})",
        )
        self.platform_version = platform_version


def _as_version(platform_version: PlatformVersion) -> Version:
    if isinstance(platform_version, Version):
        return platform_version
    return Version.parse(platform_version)


class MetadataResolver:
    """Resolves dependencies and BOMs of one catalog snapshot.

    With a version provider, wildcard upper bounds still left in the catalog
    are matched against the highest known version of their line.
    """

    def __init__(self, catalog: Catalog, version_provider: Optional[VersionProvider] = None):
        self.catalog = catalog
        self.version_provider = version_provider
        self._parser: Optional[VersionParser] = None

    def _contains(self, version_range: VersionRange, version: Version) -> bool:
        if self.version_provider is not None and version_range.upper is not None and version_range.upper.has_wildcard:
            if self._parser is None:
                self._parser = VersionParser(self.version_provider.list_known_platform_versions())
            version_range = self._parser.concretise(version_range)
        return version_range.contains(version)

    def _applicable_mapping(self, mappings: Sequence[Mapping], version: Version) -> Optional[Mapping]:
        # normalized ranges do not overlap, so the first hit is the only one
        for mapping in mappings:
            if mapping.version_range is not None and self._contains(mapping.version_range, version):
                return mapping
        return None

    def resolve_dependency(self, requested_id: str, platform_version: PlatformVersion):
        """Return the EffectiveDependency for ``platform_version`` or ABSENT.

        Raises:
            UnknownDependency: neither an id nor an alias of the catalog.
            InvalidVersionFormat: ``platform_version`` text does not parse.
        """
        version = _as_version(platform_version)
        dependency = self.catalog.find_dependency(requested_id)
        if dependency is None:
            raise UnknownDependency(requested_id)
        return self._effective_dependency(dependency, version)

    def _effective_dependency(self, dependency: Dependency, version: Version):
        if dependency.version_range is not None and not self._contains(dependency.version_range, version):
            if is_debug_enabled(logger):
                logger.debug(
                    "Dependency %s excluded for %s by %s",
                    dependency.id,
                    version,
                    dependency.version_range,
                    extra=extra_context(event="dependency_absent", component="resolver", target=dependency.id),
                )
            return ABSENT

        group_id = dependency.group_id
        artifact_id = dependency.artifact_id
        dep_version = dependency.version
        bom = dependency.bom
        repositories = (dependency.repository,) if dependency.repository else ()

        mapping = self._applicable_mapping(dependency.mappings, version)
        if mapping is not None:
            overrides = mapping.overrides
            group_id = overrides.group_id or group_id
            artifact_id = overrides.artifact_id or artifact_id
            dep_version = overrides.version or dep_version
            bom = overrides.bom_id or bom
            if overrides.repository_ids is not None:
                repositories = overrides.repository_ids

        return EffectiveDependency(
            id=dependency.id,
            name=dependency.display_name,
            description=dependency.description,
            group_id=group_id,
            artifact_id=artifact_id,
            version=dep_version,
            scope=dependency.scope,
            bom=bom,
            repositories=tuple(repositories),
            facets=dependency.facets,
            aliases=dependency.aliases,
            keywords=dependency.keywords,
            links=dependency.links,
            weight=dependency.weight,
            starter=dependency.starter,
            version_range=str(dependency.version_range) if dependency.version_range is not None else None,
        )

    def resolve_bom(self, bom_id: str, platform_version: PlatformVersion) -> EffectiveBom:
        """Return the effective BOM for ``platform_version``.

        Raises:
            UnknownBom: the id is not in the catalog.
        """
        version = _as_version(platform_version)
        bom = self.catalog.boms.get(bom_id)
        if bom is None:
            raise UnknownBom(bom_id)
        return self._effective_bom(bom, version)

    def _effective_bom(self, bom: Bom, version: Version) -> EffectiveBom:
        group_id, artifact_id, bom_version = bom.group_id, bom.artifact_id, bom.version
        repositories = bom.repositories
        additional_boms = bom.additional_boms
        mapping = self._applicable_mapping(bom.mappings, version)
        if mapping is not None:
            overrides = mapping.overrides
            group_id = overrides.group_id or group_id
            artifact_id = overrides.artifact_id or artifact_id
            bom_version = overrides.version or bom_version
            if overrides.repository_ids is not None:
                repositories = overrides.repository_ids
            if overrides.bom_id is not None:
                additional_boms = (overrides.bom_id,)
        return EffectiveBom(
            id=bom.id,
            group_id=group_id,
            artifact_id=artifact_id,
            version=bom_version,
            version_property=bom.version_property,
            order=bom.order,
            repositories=tuple(repositories),
            additional_boms=tuple(additional_boms),
        )

    def list_available_dependencies(self, platform_version: PlatformVersion) -> List[EffectiveDependency]:
        """Dependencies available for ``platform_version``, weight desc then name asc."""
        version = _as_version(platform_version)
        available = []
        for dependency in self.catalog.all_dependencies():
            effective = self._effective_dependency(dependency, version)
            if effective is not ABSENT:
                available.append(effective)
        return sort_by_weight(available)

    def search_by_keyword(self, platform_version: PlatformVersion, text: str) -> List[EffectiveDependency]:
        """Available dependencies matching every token of ``text``, best match first."""
        available = self.list_available_dependencies(platform_version)
        if not text or not text.strip():
            return available
        return rank_by_keyword(available, text)

    def apply_facet_defaults(self, requested_ids: Iterable[str], platform_version: PlatformVersion) -> List[str]:
        """Append the catalog's default dependency of every facet no selection carries.

        Returns the primary ids of the final selection, in request order with
        injected defaults last.
        """
        version = _as_version(platform_version)
        selected: List[str] = []
        for requested_id in requested_ids:
            dependency = self.catalog.find_dependency(requested_id)
            if dependency is None:
                raise UnknownDependency(requested_id)
            if dependency.id not in selected:
                selected.append(dependency.id)

        carried = set()
        for dep_id in selected:
            carried.update(self.catalog.dependencies[dep_id].facets)

        for facet, default_id in self.catalog.facet_defaults.items():
            if facet in carried or default_id in selected:
                continue
            default = self.catalog.dependencies[default_id]
            if self._effective_dependency(default, version) is ABSENT:
                continue
            selected.append(default_id)
            carried.update(default.facets)
        return selected

    def resolve_request(self, requested_ids: Iterable[str], platform_version: PlatformVersion) -> ResolvedRequest:
        """Resolve the full dependency set of a request with its BOMs and repositories.

        Raises:
            UnknownDependency: an id is not in the catalog.
            IncompatibleDependency: a requested dependency is absent for ``platform_version``.
        """
        version = _as_version(platform_version)
        dependencies = []
        for dep_id in self.apply_facet_defaults(requested_ids, version):
            dependency = self.catalog.dependencies[dep_id]
            effective = self._effective_dependency(dependency, version)
            if effective is ABSENT:
                raise IncompatibleDependency(dep_id, version, dependency.version_range_text)
            dependencies.append(effective)

        boms = {}
        pending = [dependency.bom for dependency in dependencies if dependency.bom]
        while pending:
            bom_id = pending.pop(0)
            if bom_id in boms:
                continue
            effective_bom = self._effective_bom(self.catalog.boms[bom_id], version)
            boms[bom_id] = effective_bom
            pending.extend(effective_bom.additional_boms)

        repositories: List[Repository] = []
        seen = set()
        repo_ids = [repo_id for dependency in dependencies for repo_id in dependency.repositories]
        repo_ids += [repo_id for bom in boms.values() for repo_id in bom.repositories]
        for repo_id in repo_ids:
            if repo_id not in seen:
                seen.add(repo_id)
                repositories.append(self.catalog.repositories[repo_id])

        logger.info(
            "Resolved %d dependencies, %d boms for platform version %s",
            len(dependencies),
            len(boms),
            version,
            extra=extra_context(event="request_resolved", component="resolver", outcome="success"),
        )
        return ResolvedRequest(
            platform_version=version,
            dependencies=tuple(dependencies),
            boms=tuple(sorted(boms.values(), key=lambda bom: (bom.order, bom.id))),
            repositories=tuple(repositories),
        )

    def compatible_platform_versions(self, requested_id: str) -> List[Version]:
        """Known platform versions for which ``requested_id`` is available."""
        dependency = self.catalog.find_dependency(requested_id)
        if dependency is None:
            raise UnknownDependency(requested_id)
        if self.version_provider is None:
            return []
        return [
            version
            for version in self.version_provider.list_known_platform_versions()
            if dependency.version_range is None or self._contains(dependency.version_range, version)
        ]

    def default_platform_version(self) -> Optional[Version]:
        """Highest known release from the version provider, if any."""
        if self.version_provider is None:
            return None
        return self.version_provider.default_version()


def resolve_dependency(catalog: Catalog, requested_id: str, platform_version: PlatformVersion):
    return MetadataResolver(catalog).resolve_dependency(requested_id, platform_version)


def resolve_bom(catalog: Catalog, bom_id: str, platform_version: PlatformVersion) -> EffectiveBom:
    return MetadataResolver(catalog).resolve_bom(bom_id, platform_version)


def list_available_dependencies(catalog: Catalog, platform_version: PlatformVersion) -> List[EffectiveDependency]:
    return MetadataResolver(catalog).list_available_dependencies(platform_version)


def search_by_keyword(catalog: Catalog, platform_version: PlatformVersion, text: str) -> List[EffectiveDependency]:
    return MetadataResolver(catalog).search_by_keyword(platform_version, text)


def validate(raw: RawCatalog, known_versions: Optional[Iterable[Version]] = None) -> Catalog:
    """Validate raw catalog structures; see ``catalog.validation.validate``."""
    return validate_catalog(raw, known_versions)
