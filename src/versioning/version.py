"""Four-component platform version with total ordering."""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional, Tuple

from .errors import InvalidVersionFormat
from .qualifier import Qualifier, rank_of

WILDCARD = "x"

_VERSION_PATTERN = re.compile(r"^([0-9]+)\.([0-9]+|x)\.([0-9]+|x)(?:([.-])(.+))?$")
_WILDCARD_RANK = float("inf")


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """Immutable ``major.minor.patch[.QUALIFIER]`` value.

    ``minor`` and ``patch`` are None when written as the ``x`` wildcard. A
    wildcard sorts above every concrete number so ``1.3.x.RELEASE`` is the
    top of the 1.3 line. An absent qualifier orders like RELEASE.
    """
    major: int
    minor: Optional[int]
    patch: Optional[int]
    qualifier: Optional[Qualifier] = None

    VERSION_PATTERN = _VERSION_PATTERN

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse version text.

        Raises:
            InvalidVersionFormat: a component is not numeric or the qualifier is unknown.
        """
        if text is None:
            raise InvalidVersionFormat(text, "no version text")
        raw = text.strip()
        match = _VERSION_PATTERN.match(raw)
        if not match:
            raise InvalidVersionFormat(text)
        qualifier = None
        if match.group(5) is not None:
            try:
                qualifier = Qualifier.parse(match.group(5), match.group(4))
            except InvalidVersionFormat as exc:
                raise InvalidVersionFormat(text, f"unknown qualifier '{match.group(5)}'") from exc
        return cls(
            int(match.group(1)),
            _component(match.group(2)),
            _component(match.group(3)),
            qualifier,
        )

    @classmethod
    def safely_parse(cls, text: Optional[str]) -> Optional["Version"]:
        """Parse ``text`` or return None when it is not a valid version."""
        try:
            return cls.parse(text)
        except InvalidVersionFormat:
            return None

    @property
    def has_wildcard(self) -> bool:
        return self.minor is None or self.patch is None

    @property
    def is_release(self) -> bool:
        return self.qualifier is None or self.qualifier.is_release

    @property
    def is_snapshot(self) -> bool:
        return self.qualifier is not None and self.qualifier.is_snapshot

    def sort_key(self) -> Tuple:
        return (
            self.major,
            _rank(self.minor),
            _rank(self.patch),
        ) + rank_of(self.qualifier)

    def matches_prefix(self, other: "Version") -> bool:
        """True when this concrete version fits the fixed components of ``other``.

        Wildcard components of ``other`` match anything; its qualifier family
        must match this version's qualifier family.
        """
        if self.major != other.major:
            return False
        if other.minor is not None and self.minor != other.minor:
            return False
        if other.patch is not None and self.patch != other.patch:
            return False
        return rank_of(self.qualifier)[0] == rank_of(other.qualifier)[0]

    def __eq__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other):
        if not isinstance(other, Version):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self):
        return hash(self.sort_key())

    def __str__(self):
        text = f"{self.major}.{_format(self.minor)}.{_format(self.patch)}"
        if self.qualifier is not None:
            text = f"{text}{self.qualifier.separator}{self.qualifier.token}"
        return text

    def __repr__(self):
        return f"Version('{self}')"


def _component(token: str) -> Optional[int]:
    return None if token == WILDCARD else int(token)


def _rank(component: Optional[int]):
    return _WILDCARD_RANK if component is None else component


def _format(component: Optional[int]) -> str:
    return WILDCARD if component is None else str(component)
