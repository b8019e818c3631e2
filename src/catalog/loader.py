"""Load raw catalog structures from configuration mappings or YAML files.

Keys follow the camelCase vocabulary of the catalog configuration format
(``groupId``, ``compatibilityRange``, ``additionalBoms`` ...). The loader only
shapes data; every semantic check happens in ``catalog.validation``.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from common.logging_utils import extra_context
from constants import Constants

from .errors import CatalogValidationError, ValidationError
from .models import Bom, Dependency, Group, Link, Mapping, MappingOverrides, RawCatalog, Repository

logger = logging.getLogger(__name__)

_RANGE_KEYS = ("compatibilityRange", "versionRange", "range")


def load_catalog_file(path: Optional[str] = None) -> RawCatalog:
    """Read a YAML catalog file.

    Args:
        path: File path; defaults to the ``DEPCATALOG_CATALOG`` environment variable.

    Raises:
        FileNotFoundError: no path given and none configured, or the file is missing.
        CatalogValidationError: the document does not have the catalog shape.
    """
    path = path or os.environ.get(Constants.ENV_CATALOG_FILE)
    if not path:
        raise FileNotFoundError(f"No catalog file given and {Constants.ENV_CATALOG_FILE} is not set")
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    logger.info(
        "Loaded catalog file %s",
        path,
        extra=extra_context(event="catalog_file_loaded", component="loader", target=path),
    )
    return load_catalog(data or {})


def load_catalog_text(text: str) -> RawCatalog:
    """Parse a YAML document held in memory."""
    return load_catalog(yaml.safe_load(text) or {})


def load_catalog(data: Dict[str, Any]) -> RawCatalog:
    """Shape a configuration mapping into a RawCatalog.

    Raises:
        CatalogValidationError: entries are missing required keys or have the wrong type.
    """
    if not isinstance(data, dict):
        raise CatalogValidationError([ValidationError("catalog", "catalog document must be a mapping")])
    if isinstance(data.get(Constants.CATALOG_ROOT_KEY), dict):
        data = data[Constants.CATALOG_ROOT_KEY]

    problems: List[ValidationError] = []
    groups = tuple(_load_groups(data.get("dependencies") or [], problems))
    boms = tuple(_load_boms(data.get("boms") or {}, problems))
    repositories = tuple(_load_repositories(data.get("repositories") or {}, problems))
    env = _load_env(data.get("env") or {}, problems)
    facet_defaults = tuple((str(k), str(v)) for k, v in env.get("facetDefaults", {}).items())
    if problems:
        raise CatalogValidationError(problems)
    return RawCatalog(
        groups=groups,
        boms=boms,
        repositories=repositories,
        facet_defaults=facet_defaults,
        platform_group_id=env.get("platformGroupId"),
    )


def _load_env(env: Any, problems: List[ValidationError]) -> Dict[str, Any]:
    if not isinstance(env, dict):
        problems.append(ValidationError("env", "env must be a mapping"))
        return {}
    facet_defaults = env.get("facetDefaults") or {}
    if not isinstance(facet_defaults, dict):
        problems.append(ValidationError("env", "facetDefaults must be a mapping of facet to dependency id"))
        facet_defaults = {}
    return dict(env, facetDefaults=facet_defaults)


def _load_groups(entries: Iterable[Any], problems: List[ValidationError]) -> Iterable[Group]:
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or not entry.get("name"):
            problems.append(ValidationError(f"group[{index}]", "group must be a mapping with a name"))
            continue
        content = []
        for dep_index, dep_entry in enumerate(entry.get("content") or []):
            dependency = _load_dependency(dep_entry, f"{entry['name']}[{dep_index}]", problems)
            if dependency is not None:
                content.append(dependency)
        yield Group(
            name=str(entry["name"]),
            version_range_text=_range_text(entry),
            bom=entry.get("bom"),
            repository=entry.get("repository"),
            group_id=entry.get("groupId"),
            content=tuple(content),
        )


def _load_dependency(entry: Any, location: str, problems: List[ValidationError]) -> Optional[Dependency]:
    if not isinstance(entry, dict) or not entry.get("id"):
        problems.append(ValidationError(location, "dependency must be a mapping with an id"))
        return None
    dep_id = str(entry["id"])
    try:
        weight = int(entry.get("weight", 0))
    except (TypeError, ValueError):
        problems.append(ValidationError(dep_id, f"weight '{entry.get('weight')}' is not an integer"))
        weight = 0
    return Dependency(
        id=dep_id,
        name=entry.get("name"),
        description=entry.get("description"),
        group_id=entry.get("groupId"),
        artifact_id=entry.get("artifactId"),
        version=_version(entry.get("version"), dep_id, problems),
        version_range_text=_range_text(entry),
        bom=entry.get("bom"),
        repository=entry.get("repository"),
        scope=entry.get("scope"),
        aliases=_strings(entry.get("aliases")),
        facets=_strings(entry.get("facets")),
        weight=weight,
        keywords=_strings(entry.get("keywords")),
        links=tuple(_load_links(entry.get("links") or [], dep_id, problems)),
        starter=bool(entry.get("starter", True)),
        mappings=tuple(_load_mappings(entry.get("mappings") or [], dep_id, problems)),
    )


def _load_links(entries: Iterable[Any], owner: str, problems: List[ValidationError]) -> Iterable[Link]:
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("rel") or not entry.get("href"):
            problems.append(ValidationError(owner, "link must declare rel and href"))
            continue
        yield Link(rel=str(entry["rel"]), href=str(entry["href"]), description=entry.get("description"))


def _load_mappings(entries: Iterable[Any], owner: str, problems: List[ValidationError]) -> Iterable[Mapping]:
    for entry in entries:
        if not isinstance(entry, dict):
            problems.append(ValidationError(owner, "mapping must be a mapping"))
            continue
        repositories = entry.get("repositories")
        if repositories is None and entry.get("repository") is not None:
            repositories = [entry["repository"]]
        overrides = MappingOverrides(
            group_id=entry.get("groupId"),
            artifact_id=entry.get("artifactId"),
            version=_version(entry.get("version"), owner, problems),
            repository_ids=_strings(repositories) if repositories is not None else None,
            bom_id=entry.get("bom"),
        )
        yield Mapping(range_text=_range_text(entry), overrides=overrides)


def _load_boms(entries: Dict[str, Any], problems: List[ValidationError]) -> Iterable[Bom]:
    if not isinstance(entries, dict):
        problems.append(ValidationError("boms", "boms must be a mapping of id to definition"))
        return
    for bom_id, entry in entries.items():
        entry = entry or {}
        if not isinstance(entry, dict):
            problems.append(ValidationError(str(bom_id), "bom must be a mapping"))
            continue
        if not entry.get("groupId") or not entry.get("artifactId"):
            problems.append(ValidationError(str(bom_id), "bom must declare groupId and artifactId"))
            continue
        try:
            order = int(entry.get("order", Bom.order))
        except (TypeError, ValueError):
            problems.append(ValidationError(str(bom_id), f"order '{entry.get('order')}' is not an integer"))
            order = Bom.order
        yield Bom(
            id=str(bom_id),
            group_id=entry["groupId"],
            artifact_id=entry["artifactId"],
            version=_version(entry.get("version"), str(bom_id), problems),
            version_property=entry.get("versionProperty"),
            order=order,
            repositories=_strings(entry.get("repositories")),
            additional_boms=_strings(entry.get("additionalBoms")),
            mappings=tuple(_load_mappings(entry.get("mappings") or [], str(bom_id), problems)),
        )


def _load_repositories(entries: Dict[str, Any], problems: List[ValidationError]) -> Iterable[Repository]:
    if not isinstance(entries, dict):
        problems.append(ValidationError("repositories", "repositories must be a mapping of id to definition"))
        return
    for repo_id, entry in entries.items():
        entry = entry or {}
        if not isinstance(entry, dict):
            problems.append(ValidationError(str(repo_id), "repository must be a mapping"))
            continue
        yield Repository(
            id=str(repo_id),
            name=entry.get("name"),
            url=entry.get("url"),
            releases_enabled=bool(entry.get("releasesEnabled", True)),
            snapshots_enabled=bool(entry.get("snapshotsEnabled", False)),
        )


def _range_text(entry: Dict[str, Any]) -> Optional[str]:
    for key in _RANGE_KEYS:
        if entry.get(key) is not None:
            return str(entry[key])
    return None


def _version(value: Any, owner: str, problems: List[ValidationError]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float):
        # YAML reads 2.10 as the number 2.1
        problems.append(ValidationError(owner, f"version {value!r} is a number, quote it to keep every digit"))
        return None
    return str(value)


def _strings(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)
