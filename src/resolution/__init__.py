"""Resolution of effective dependencies and BOMs for a platform version."""

from .models import ABSENT, EffectiveBom, EffectiveDependency, ResolvedRequest
from .resolver import (
    IncompatibleDependency,
    MetadataResolver,
    ResolutionError,
    UnknownBom,
    UnknownDependency,
    list_available_dependencies,
    resolve_bom,
    resolve_dependency,
    search_by_keyword,
    validate,
)

__all__ = [
    "ABSENT",
    "EffectiveBom",
    "EffectiveDependency",
    "IncompatibleDependency",
    "MetadataResolver",
    "ResolutionError",
    "ResolvedRequest",
    "UnknownBom",
    "UnknownDependency",
    "list_available_dependencies",
    "resolve_bom",
    "resolve_dependency",
    "search_by_keyword",
    "validate",
]
