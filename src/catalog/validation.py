"""Load-time catalog validation.

``CatalogBuilder`` walks a raw catalog through one-way stages::

    RAW -> GROUPS_MERGED -> MAPPINGS_NORMALIZED -> REFERENCES_RESOLVED -> VALID

Every stage runs even when an earlier one reported problems so the operator
sees all of them at once. A catalog with any problem never reaches VALID and
no partially built snapshot is returned.
"""
from __future__ import annotations

import logging
import re
from dataclasses import replace
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from versioning.errors import ParseError
from versioning.parser import VersionParser
from versioning.qualifier import Qualifier, QualifierKind
from versioning.range import VersionRange
from versioning.version import Version

from .errors import (
    CatalogValidationError,
    ConflictingBomVersion,
    ConflictingMapping,
    DuplicateAlias,
    DuplicateId,
    InvalidRange,
    UncoveredMappingRange,
    UnresolvedReference,
    ValidationError,
)
from .models import Bom, Catalog, Dependency, Group, Mapping, RawCatalog, Repository

logger = logging.getLogger(__name__)

_STARTER_PATTERN = re.compile(Constants.STARTER_PATTERN)


class CatalogState(Enum):
    """Stages of the catalog build, in order."""
    RAW = 0
    GROUPS_MERGED = 1
    MAPPINGS_NORMALIZED = 2
    REFERENCES_RESOLVED = 3
    VALID = 4


class CatalogBuilder:
    """Turns a RawCatalog into a validated Catalog snapshot.

    A builder is single use: ``build`` either returns the snapshot or raises
    ``CatalogValidationError`` listing every problem found. When known
    platform versions are given, wildcard upper bounds of the stored ranges
    are replaced with the highest matching known version.
    """

    def __init__(self, raw: RawCatalog, known_versions: Optional[Iterable[Version]] = None):
        self.raw = raw
        self.parser = VersionParser(known_versions)
        self.state = CatalogState.RAW
        self.errors: List[ValidationError] = []
        self.platform_group_id = raw.platform_group_id or Constants.PLATFORM_GROUP_ID
        self._groups: List[Group] = []
        self._dependencies: Dict[str, Dependency] = {}
        self._boms: Dict[str, Bom] = {}
        self._repositories: Dict[str, Repository] = {}
        self._aliases: Dict[str, str] = {}
        self._facet_defaults: Dict[str, str] = {}

    def build(self) -> Catalog:
        if self.state is not CatalogState.RAW:
            raise RuntimeError(f"Catalog builder already used (state {self.state.name})")
        with Timer() as timer:
            self._merge_groups()
            self._advance(CatalogState.GROUPS_MERGED)
            self._normalize_mappings()
            self._advance(CatalogState.MAPPINGS_NORMALIZED)
            self._resolve_references()
            self._advance(CatalogState.REFERENCES_RESOLVED)

        if self.errors:
            logger.warning(
                "Catalog rejected with %d validation error(s)",
                len(self.errors),
                extra=extra_context(
                    event="catalog_build",
                    component="catalog_builder",
                    outcome="rejected",
                    duration_ms=timer.duration_ms(),
                ),
            )
            raise CatalogValidationError(self.errors)

        catalog = Catalog(
            groups=tuple(self._groups),
            dependencies=MappingProxyType(dict(self._dependencies)),
            aliases=MappingProxyType(dict(self._aliases)),
            boms=MappingProxyType(dict(self._boms)),
            repositories=MappingProxyType(dict(self._repositories)),
            facet_defaults=MappingProxyType(dict(self._facet_defaults)),
            platform_group_id=self.platform_group_id,
        )
        self._advance(CatalogState.VALID)
        logger.info(
            "Catalog built: %d dependencies, %d boms, %d repositories",
            len(catalog.dependencies),
            len(catalog.boms),
            len(catalog.repositories),
            extra=extra_context(
                event="catalog_build",
                component="catalog_builder",
                outcome="valid",
                duration_ms=timer.duration_ms(),
            ),
        )
        return catalog

    def _advance(self, state: CatalogState) -> None:
        if state.value != self.state.value + 1:
            raise RuntimeError(f"Illegal catalog state transition {self.state.name} -> {state.name}")
        self.state = state
        if is_debug_enabled(logger):
            logger.debug(
                "Catalog stage %s reached (%d error(s) so far)",
                state.name,
                len(self.errors),
                extra=extra_context(event="catalog_stage", component="catalog_builder", action=state.name),
            )

    # -- GROUPS_MERGED --------------------------------------------------

    def _merge_groups(self) -> None:
        for repository in self.raw.repositories:
            if repository.id in self._repositories:
                self.errors.append(DuplicateId(repository.id, "repository id declared more than once"))
                continue
            self._repositories[repository.id] = repository
        for bom in self.raw.boms:
            if bom.id in self._boms:
                self.errors.append(DuplicateId(bom.id, "bom id declared more than once"))
                continue
            if bom.version is None and not any(m.overrides.version for m in bom.mappings):
                self.errors.append(ValidationError(bom.id, "bom must declare a version or versioned mappings"))
            self._boms[bom.id] = bom

        for group in self.raw.groups:
            group_range = self._parse_range(group.name, group.version_range_text)
            merged = []
            for dependency in group.content:
                dependency = self._materialize(dependency, group, group_range)
                if dependency.id in self._dependencies:
                    self.errors.append(DuplicateId(dependency.id, "dependency id declared more than once"))
                    continue
                self._dependencies[dependency.id] = dependency
                merged.append(dependency)
            self._groups.append(replace(group, content=tuple(merged)))

    def _materialize(self, dependency: Dependency, group: Group, group_range: Optional[VersionRange]) -> Dependency:
        """Copy unset fields from the group and derive starter coordinates."""
        range_text = dependency.version_range_text
        version_range = None
        if range_text is not None:
            version_range = self._parse_range(dependency.id, range_text)
        elif group.version_range_text is not None:
            range_text = group.version_range_text
            version_range = group_range

        group_id = dependency.group_id or group.group_id
        artifact_id = dependency.artifact_id
        bom = dependency.bom or group.bom
        if group_id is None and artifact_id is None and bom is None:
            group_id = self.platform_group_id
            if _STARTER_PATTERN.match(dependency.id):
                artifact_id = dependency.id
            else:
                artifact_id = f"{Constants.STARTER_PREFIX}{dependency.id}"
        elif group_id is None or artifact_id is None:
            self.errors.append(
                ValidationError(dependency.id, "dependency must declare both groupId and artifactId")
            )

        scope = dependency.scope or Constants.DEFAULT_SCOPE
        if scope not in Constants.SUPPORTED_SCOPES:
            self.errors.append(ValidationError(dependency.id, f"unsupported scope '{scope}'"))
        if dependency.weight < 0:
            self.errors.append(ValidationError(dependency.id, f"weight must not be negative ({dependency.weight})"))

        return replace(
            dependency,
            group_id=group_id,
            artifact_id=artifact_id,
            bom=bom,
            repository=dependency.repository or group.repository,
            scope=scope,
            version_range_text=range_text,
            version_range=version_range,
        )

    def _parse_range(self, owner: str, text: Optional[str]) -> Optional[VersionRange]:
        if text is None:
            return None
        try:
            return self.parser.concretise(VersionRange.parse(text).check_bounds())
        except ParseError as exc:
            self.errors.append(InvalidRange(owner, str(exc)))
            return None

    # -- MAPPINGS_NORMALIZED --------------------------------------------

    def _normalize_mappings(self) -> None:
        for dep_id, dependency in list(self._dependencies.items()):
            if dependency.mappings:
                mappings = self._normalize(dep_id, dependency.mappings, dependency.version_range)
                self._dependencies[dep_id] = replace(dependency, mappings=mappings)
        for bom_id, bom in list(self._boms.items()):
            if bom.mappings:
                self._boms[bom_id] = replace(bom, mappings=self._normalize(bom_id, bom.mappings, None))
        self._groups = [
            replace(group, content=tuple(self._dependencies.get(dep.id, dep) for dep in group.content))
            for group in self._groups
        ]

    def _normalize(
        self, owner: str, mappings: Sequence[Mapping], owner_range: Optional[VersionRange]
    ) -> Tuple[Mapping, ...]:
        """Give every mapping a concrete interval and check they do not overlap.

        Overlap and coverage are checked on the declared intervals, where a
        wildcard upper bound still covers its whole line.
        """
        lowers = [self._mapping_lower(owner, mapping) for mapping in mappings]
        normalized: List[Mapping] = []
        declared: List[VersionRange] = []
        failed = False
        for index, mapping in enumerate(mappings):
            try:
                if mapping.is_implicit:
                    text = (mapping.range_text or "").strip()
                    lower = Version.parse(text) if text else None
                    upper = lowers[index + 1] if index + 1 < len(mappings) else None
                    version_range = VersionRange(lower, True, upper, False)
                else:
                    version_range = VersionRange.parse(mapping.range_text)
                if version_range.lower is None and owner_range is not None and owner_range.lower is not None:
                    version_range = version_range.with_lower(owner_range.lower, owner_range.lower_inclusive)
                version_range.check_bounds()
            except ParseError as exc:
                self.errors.append(InvalidRange(owner, f"mapping #{index + 1}: {exc}"))
                failed = True
                normalized.append(mapping)
                continue
            declared.append(version_range)
            normalized.append(mapping.normalized(self.parser.concretise(version_range)))

        if failed:
            return tuple(normalized)

        for first_index, first in enumerate(declared):
            for second in declared[first_index + 1:]:
                if first.overlaps(second):
                    self.errors.append(
                        ConflictingMapping(
                            owner,
                            f"mapping ranges {first} and {second} overlap",
                        )
                    )
        if owner_range is not None:
            gap = find_uncovered(owner_range, declared)
            if gap is not None:
                self.errors.append(
                    UncoveredMappingRange(
                        owner,
                        f"no mapping covers {gap} within compatibility range {owner_range}",
                    )
                )
        return tuple(normalized)

    def _mapping_lower(self, owner: str, mapping: Mapping) -> Optional[Version]:
        """Lower bound of a mapping, used as the implied upper bound of its predecessor."""
        text = (mapping.range_text or "").strip()
        if not text:
            return None
        try:
            if mapping.is_implicit:
                return Version.parse(text)
            return VersionRange.parse(text).lower
        except ParseError:
            # reported while normalizing the mapping itself
            return None

    # -- REFERENCES_RESOLVED --------------------------------------------

    def _resolve_references(self) -> None:
        for dependency in self._dependencies.values():
            self._check_bom(dependency.id, dependency.bom)
            self._check_repository(dependency.id, dependency.repository)
            for mapping in dependency.mappings:
                self._check_overrides(dependency.id, mapping)
        for bom in self._boms.values():
            for repo_id in bom.repositories:
                self._check_repository(bom.id, repo_id)
            for additional in bom.additional_boms:
                self._check_bom(bom.id, additional)
            for mapping in bom.mappings:
                self._check_overrides(bom.id, mapping)
        self._index_aliases()
        self._resolve_facet_defaults()
        self._check_bom_versions()

    def _check_bom(self, owner: str, bom_id: Optional[str]) -> None:
        if bom_id is not None and bom_id not in self._boms:
            self.errors.append(UnresolvedReference(owner, f"bom '{bom_id}' does not exist"))

    def _check_repository(self, owner: str, repo_id: Optional[str]) -> None:
        if repo_id is not None and repo_id not in self._repositories:
            self.errors.append(UnresolvedReference(owner, f"repository '{repo_id}' does not exist"))

    def _check_overrides(self, owner: str, mapping: Mapping) -> None:
        for repo_id in mapping.overrides.repository_ids or ():
            self._check_repository(owner, repo_id)
        self._check_bom(owner, mapping.overrides.bom_id)

    def _index_aliases(self) -> None:
        for dependency in self._dependencies.values():
            for alias in dependency.aliases:
                if alias == dependency.id:
                    continue
                if alias in self._dependencies:
                    self.errors.append(
                        DuplicateAlias(dependency.id, f"alias '{alias}' shadows the id of another dependency")
                    )
                elif alias in self._aliases:
                    self.errors.append(
                        DuplicateAlias(
                            dependency.id,
                            f"alias '{alias}' is already used by '{self._aliases[alias]}'",
                        )
                    )
                else:
                    self._aliases[alias] = dependency.id

    def _resolve_facet_defaults(self) -> None:
        if self.raw.facet_defaults:
            for facet, dep_id in self.raw.facet_defaults:
                if dep_id not in self._dependencies and dep_id not in self._aliases:
                    self.errors.append(
                        UnresolvedReference(f"facet:{facet}", f"default dependency '{dep_id}' does not exist")
                    )
                    continue
                self._facet_defaults[facet] = self._aliases.get(dep_id, dep_id)
            return
        # built-in defaults only apply to catalogs that declare the target
        for facet, dep_id in Constants.DEFAULT_FACET_DEPENDENCIES.items():
            if dep_id in self._dependencies:
                self._facet_defaults[facet] = dep_id

    def _check_bom_versions(self) -> None:
        scopes: Dict[Tuple[str, str], List[Tuple[str, Optional[VersionRange], Optional[str]]]] = {}
        for bom in self._boms.values():
            if bom.mappings:
                for mapping in bom.mappings:
                    if mapping.version_range is None:
                        continue
                    coordinates = (
                        mapping.overrides.group_id or bom.group_id,
                        mapping.overrides.artifact_id or bom.artifact_id,
                    )
                    version = mapping.overrides.version or bom.version
                    scopes.setdefault(coordinates, []).append((bom.id, mapping.version_range, version))
                if bom.version is not None:
                    # the base version applies wherever no mapping does
                    for gap in uncovered_ranges([m.version_range for m in bom.mappings if m.version_range]):
                        scopes.setdefault(bom.coordinates, []).append((bom.id, gap, bom.version))
            else:
                scopes.setdefault(bom.coordinates, []).append((bom.id, None, bom.version))

        for coordinates, entries in scopes.items():
            reported = set()
            for index, (first_id, first_range, first_version) in enumerate(entries):
                for second_id, second_range, second_version in entries[index + 1:]:
                    if first_id == second_id or first_version == second_version:
                        continue
                    if first_range is not None and second_range is not None and not first_range.overlaps(second_range):
                        continue
                    key = tuple(sorted((first_id, second_id)))
                    if key in reported:
                        continue
                    reported.add(key)
                    self.errors.append(
                        ConflictingBomVersion(
                            first_id,
                            f"{coordinates[0]}:{coordinates[1]} is declared with version {first_version} "
                            f"and with version {second_version} by '{second_id}'",
                        )
                    )


def validate(raw: RawCatalog, known_versions: Optional[Iterable[Version]] = None) -> Catalog:
    """Build a validated Catalog snapshot from raw structures.

    Args:
        raw: catalog structures as loaded.
        known_versions: published platform versions used to concretise wildcards.

    Raises:
        CatalogValidationError: with every problem found.
    """
    return CatalogBuilder(raw, known_versions).build()


def find_uncovered(owner_range: VersionRange, ranges: Sequence[VersionRange]) -> Optional[VersionRange]:
    """Return the first sub-range of ``owner_range`` covered by none of ``ranges``.

    Upper bounds carrying a wildcard cover their whole line, so coverage
    resumes at the first milestone of the next line.
    """
    ordered = sorted(ranges, key=_lower_key)
    cursor = owner_range.lower
    cursor_inclusive = owner_range.lower_inclusive
    for version_range in ordered:
        if _starts_after(version_range, cursor, cursor_inclusive):
            if owner_range.upper is not None and version_range.lower is not None and (
                version_range.lower > owner_range.upper
                or (version_range.lower == owner_range.upper and not owner_range.upper_inclusive)
            ):
                break
            return VersionRange(cursor, cursor_inclusive, version_range.lower, not version_range.lower_inclusive)
        if version_range.upper is None:
            return None
        upper, upper_inclusive = version_range.upper, version_range.upper_inclusive
        if upper.has_wildcard and upper_inclusive:
            upper, upper_inclusive = _next_line_start(upper), False
        if cursor is None or upper > cursor or (upper == cursor and not cursor_inclusive):
            cursor, cursor_inclusive = upper, not upper_inclusive
        elif upper == cursor and upper_inclusive:
            cursor_inclusive = False

    if owner_range.upper is None:
        return VersionRange(cursor, cursor_inclusive, None, False)
    if cursor is None:
        return None
    if cursor < owner_range.upper or (cursor == owner_range.upper and cursor_inclusive and owner_range.upper_inclusive):
        return VersionRange(cursor, cursor_inclusive, owner_range.upper, owner_range.upper_inclusive)
    return None


def uncovered_ranges(ranges: Sequence[VersionRange]) -> List[VersionRange]:
    """Return every interval of the whole version line covered by none of ``ranges``."""
    gaps: List[VersionRange] = []
    cursor: Optional[Version] = None
    cursor_inclusive = True
    for version_range in sorted(ranges, key=_lower_key):
        if _starts_after(version_range, cursor, cursor_inclusive):
            gaps.append(VersionRange(cursor, cursor_inclusive, version_range.lower, not version_range.lower_inclusive))
        if version_range.upper is None:
            return gaps
        upper, upper_inclusive = version_range.upper, version_range.upper_inclusive
        if cursor is None or upper > cursor or (upper == cursor and not cursor_inclusive):
            cursor, cursor_inclusive = upper, not upper_inclusive
        elif upper == cursor and upper_inclusive:
            cursor_inclusive = False
    gaps.append(VersionRange(cursor, cursor_inclusive, None, False))
    return gaps


def _lower_key(version_range: VersionRange):
    if version_range.lower is None:
        return (0,)
    return (1,) + version_range.lower.sort_key() + (0 if version_range.lower_inclusive else 1,)


def _starts_after(version_range: VersionRange, cursor: Optional[Version], cursor_inclusive: bool) -> bool:
    """True when ``version_range`` leaves versions at or just above ``cursor`` uncovered."""
    if version_range.lower is None:
        return False
    if cursor is None:
        return True
    if version_range.lower > cursor:
        return True
    return version_range.lower == cursor and cursor_inclusive and not version_range.lower_inclusive


def _next_line_start(version: Version) -> Version:
    first_milestone = Qualifier(QualifierKind.MILESTONE, 1, "M1", ".")
    if version.minor is None:
        return Version(version.major + 1, 0, 0, first_milestone)
    return Version(version.major, version.minor + 1, 0, first_milestone)
