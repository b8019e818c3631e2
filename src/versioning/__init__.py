"""Platform version model, ranges and parsing."""

from .errors import InvalidRangeBounds, InvalidRangeFormat, InvalidVersionFormat, ParseError
from .parser import VersionParser
from .qualifier import Qualifier, QualifierKind
from .range import VersionRange
from .version import Version

__all__ = [
    "InvalidRangeBounds",
    "InvalidRangeFormat",
    "InvalidVersionFormat",
    "ParseError",
    "Qualifier",
    "QualifierKind",
    "Version",
    "VersionParser",
    "VersionRange",
]
