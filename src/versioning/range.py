"""Version ranges over platform versions.

Supports the bracket notation (``[1.1.6.RELEASE,1.3.0.M1)``, ``(,2.0.0]``,
``[1.5.0,)``) and the bare-version shorthand where ``1.2.0.RELEASE`` means
"that version and everything above it".
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from .errors import InvalidRangeBounds, InvalidRangeFormat
from .version import Version

_OPENERS = {"[": True, "(": False}
_CLOSERS = {"]": True, ")": False}


@dataclass(frozen=True)
class VersionRange:
    """Interval over Version with per-bound inclusivity.

    ``lower`` is None when the range has no lower bound and ``upper`` is None
    when it is unbounded above.
    """
    lower: Optional[Version]
    lower_inclusive: bool = True
    upper: Optional[Version] = None
    upper_inclusive: bool = False

    @classmethod
    def parse(cls, text: str) -> "VersionRange":
        """Parse range text. Purely syntactic: bound order is not checked here.

        Raises:
            InvalidRangeFormat: empty text or malformed bracket notation.
            InvalidVersionFormat: a bound is not a valid version.
        """
        if text is None or not text.strip():
            raise InvalidRangeFormat(text, "range text is empty")
        raw = text.strip()
        if raw[0] not in _OPENERS:
            if any(char in raw for char in "[](),"):
                raise InvalidRangeFormat(text, "unexpected bracket or comma")
            return cls(Version.parse(raw), True, None, False)

        if raw[-1] not in _CLOSERS:
            raise InvalidRangeFormat(text, "missing closing bracket")
        inner = raw[1:-1]
        parts = inner.split(",")
        if len(parts) != 2:
            raise InvalidRangeFormat(text, "expected exactly one comma")
        lower_text, upper_text = parts[0].strip(), parts[1].strip()
        if not lower_text and not upper_text:
            raise InvalidRangeFormat(text, "both bounds are empty")
        lower = Version.parse(lower_text) if lower_text else None
        upper = Version.parse(upper_text) if upper_text else None
        return cls(lower, _OPENERS[raw[0]], upper, _CLOSERS[raw[-1]])

    @property
    def is_single_version(self) -> bool:
        """True for the bare-version shorthand ``[v, infinity)``."""
        return self.lower is not None and self.lower_inclusive and self.upper is None

    def check_bounds(self) -> "VersionRange":
        """Validate the interval and return self.

        Raises:
            InvalidRangeBounds: lower exceeds upper, the interval is empty, or the
                lower bound holds a wildcard.
        """
        if self.lower is not None and self.lower.has_wildcard:
            raise InvalidRangeBounds(str(self), "a wildcard is only valid in an upper bound")
        if self.lower is not None and self.upper is not None:
            if self.lower > self.upper:
                raise InvalidRangeBounds(str(self), f"lower bound {self.lower} exceeds upper bound {self.upper}")
            if self.lower == self.upper and not (self.lower_inclusive and self.upper_inclusive):
                raise InvalidRangeBounds(str(self), "range is empty")
        return self

    def contains(self, version: Version) -> bool:
        if self.lower is not None:
            if self.lower_inclusive and version < self.lower:
                return False
            if not self.lower_inclusive and version <= self.lower:
                return False
        if self.upper is not None:
            if self.upper_inclusive and version > self.upper:
                return False
            if not self.upper_inclusive and version >= self.upper:
                return False
        return True

    def __contains__(self, version: Version) -> bool:
        return self.contains(version)

    def match(self, candidates: Iterable[Version]) -> Optional[Version]:
        """Return the highest candidate contained in this range, if any."""
        best = None
        for candidate in candidates:
            if candidate.has_wildcard or not self.contains(candidate):
                continue
            if best is None or candidate > best:
                best = candidate
        return best

    def overlaps(self, other: "VersionRange") -> bool:
        """True when at least one version lies in both ranges."""
        lower, lower_inclusive = _max_lower(self, other)
        upper, upper_inclusive = _min_upper(self, other)
        if lower is None or upper is None:
            return True
        if lower < upper:
            return True
        return lower == upper and lower_inclusive and upper_inclusive

    def with_lower(self, lower: Optional[Version], inclusive: bool) -> "VersionRange":
        return VersionRange(lower, inclusive, self.upper, self.upper_inclusive)

    def __str__(self):
        if self.is_single_version:
            return str(self.lower)
        return "{}{},{}{}".format(
            "[" if self.lower_inclusive else "(",
            self.lower if self.lower is not None else "",
            self.upper if self.upper is not None else "",
            "]" if self.upper_inclusive else ")",
        )


def _max_lower(first: VersionRange, second: VersionRange):
    if first.lower is None:
        return second.lower, second.lower_inclusive
    if second.lower is None or first.lower > second.lower:
        return first.lower, first.lower_inclusive
    if second.lower > first.lower:
        return second.lower, second.lower_inclusive
    return first.lower, first.lower_inclusive and second.lower_inclusive


def _min_upper(first: VersionRange, second: VersionRange):
    if first.upper is None:
        return second.upper, second.upper_inclusive
    if second.upper is None or first.upper < second.upper:
        return first.upper, first.upper_inclusive
    if second.upper < first.upper:
        return second.upper, second.upper_inclusive
    return first.upper, first.upper_inclusive and second.upper_inclusive
