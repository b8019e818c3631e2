"""Catalog model, loading and load-time validation."""

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
from .holder import CatalogHolder
from .loader import load_catalog, load_catalog_file, load_catalog_text
from .models import Bom, Catalog, Dependency, Group, Link, Mapping, MappingOverrides, RawCatalog, Repository
from .validation import CatalogBuilder, CatalogState, validate

__all__ = [
    "Bom",
    "Catalog",
    "CatalogBuilder",
    "CatalogHolder",
    "CatalogState",
    "CatalogValidationError",
    "ConflictingBomVersion",
    "ConflictingMapping",
    "Dependency",
    "DuplicateAlias",
    "DuplicateId",
    "Group",
    "InvalidRange",
    "Link",
    "Mapping",
    "MappingOverrides",
    "RawCatalog",
    "Repository",
    "UncoveredMappingRange",
    "UnresolvedReference",
    "ValidationError",
    "load_catalog",
    "load_catalog_file",
    "load_catalog_text",
    "validate",
]
