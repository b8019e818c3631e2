"""Qualifier model: the fourth component of a platform version."""

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Optional, Tuple

from .errors import InvalidVersionFormat


class QualifierKind(Enum):
    """Qualifier families, valued by their ordering rank."""
    MILESTONE = 0
    RELEASE_CANDIDATE = 1
    RELEASE = 2
    SNAPSHOT = 3


_NUMBERED = {"M": QualifierKind.MILESTONE, "RC": QualifierKind.RELEASE_CANDIDATE}
_NAMED = {
    "RELEASE": QualifierKind.RELEASE,
    "BUILD-SNAPSHOT": QualifierKind.SNAPSHOT,
    "SNAPSHOT": QualifierKind.SNAPSHOT,
}
_NUMBERED_PATTERN = re.compile(r"^(M|RC)([0-9]+)$")


@total_ordering
@dataclass(frozen=True, eq=False)
class Qualifier:
    """Parsed qualifier such as ``M2``, ``RC1``, ``RELEASE`` or ``BUILD-SNAPSHOT``.

    ``token`` keeps the spelling used in the source text and ``separator`` the
    character that preceded it; neither takes part in comparisons.
    """
    kind: QualifierKind
    number: int = 0
    token: str = "RELEASE"
    separator: str = "."

    @classmethod
    def parse(cls, token: str, separator: str = ".") -> "Qualifier":
        """Parse a qualifier token, case-sensitively.

        Raises:
            InvalidVersionFormat: the token is not a known qualifier.
        """
        if token in _NAMED:
            return cls(_NAMED[token], 0, token, separator)
        match = _NUMBERED_PATTERN.match(token)
        if not match:
            raise InvalidVersionFormat(token, f"unknown qualifier '{token}'")
        return cls(_NUMBERED[match.group(1)], int(match.group(2)), token, separator)

    @property
    def is_release(self) -> bool:
        return self.kind is QualifierKind.RELEASE

    @property
    def is_snapshot(self) -> bool:
        return self.kind is QualifierKind.SNAPSHOT

    def sort_key(self) -> Tuple[int, int]:
        return (self.kind.value, self.number)

    def __eq__(self, other):
        if not isinstance(other, Qualifier):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other):
        if not isinstance(other, Qualifier):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self):
        return hash(self.sort_key())

    def __str__(self):
        return self.token


def rank_of(qualifier: Optional[Qualifier]) -> Tuple[int, int]:
    """Ordering key of an optional qualifier; absent ranks as RELEASE."""
    if qualifier is None:
        return (QualifierKind.RELEASE.value, 0)
    return qualifier.sort_key()
