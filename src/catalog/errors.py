"""Catalog validation errors.

Individual problems are plain records so a build can collect all of them;
``CatalogValidationError`` carries the batch to the caller.
"""

from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class ValidationError:
    """A single catalog problem attached to the id of the entry that owns it."""
    owner: str
    message: str

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self):
        return f"{self.kind}: {self.owner}: {self.message}"


@dataclass(frozen=True)
class DuplicateId(ValidationError):
    """Two entries of the same type share an id."""


@dataclass(frozen=True)
class DuplicateAlias(ValidationError):
    """An alias is claimed by more than one dependency or shadows an id."""


@dataclass(frozen=True)
class UnresolvedReference(ValidationError):
    """A bom, repository or dependency id does not exist in the catalog."""


@dataclass(frozen=True)
class InvalidRange(ValidationError):
    """A range does not parse or its bounds are unusable."""


@dataclass(frozen=True)
class ConflictingMapping(ValidationError):
    """Two mappings of one owner cover a common platform version."""


@dataclass(frozen=True)
class UncoveredMappingRange(ValidationError):
    """Part of an owner's compatibility range is covered by no mapping."""


@dataclass(frozen=True)
class ConflictingBomVersion(ValidationError):
    """Two BOMs declare the same coordinates with different versions."""


class CatalogValidationError(Exception):
    """Raised when a raw catalog fails validation; holds every problem found."""

    def __init__(self, errors: Sequence[ValidationError]):
        self.errors: List[ValidationError] = list(errors)
        summary = "; ".join(str(error) for error in self.errors)
        super().__init__(f"Catalog validation failed with {len(self.errors)} error(s): {summary}")

    def of_kind(self, kind: type) -> List[ValidationError]:
        return [error for error in self.errors if isinstance(error, kind)]
