"""Text parsing for platform versions and ranges.

``VersionParser`` wraps ``Version.parse`` and ``VersionRange.parse`` and, when
given the list of known platform versions, replaces ``x`` wildcards in range
bounds with the highest concrete version of the matching line.
"""

import logging
from typing import Iterable, List, Optional

from common.logging_utils import extra_context, is_debug_enabled

from .range import VersionRange
from .version import Version

logger = logging.getLogger(__name__)


class VersionParser:
    """Parser for versions and ranges, optionally aware of published versions."""

    def __init__(self, known_versions: Optional[Iterable[Version]] = None):
        self.known_versions: List[Version] = sorted(
            v for v in (known_versions or []) if not v.has_wildcard
        )

    def parse(self, text: str) -> Version:
        """Parse version text, concretising wildcards against known versions."""
        version = Version.parse(text)
        if version.has_wildcard:
            return self.resolve_wildcard(version)
        return version

    def safely_parse(self, text: Optional[str]) -> Optional[Version]:
        return Version.safely_parse(text)

    def parse_range(self, text: str) -> VersionRange:
        """Parse range text; wildcard bounds are concretised when possible."""
        return self.concretise(VersionRange.parse(text))

    def concretise(self, version_range: VersionRange) -> VersionRange:
        """Replace a wildcard upper bound with the highest matching known version.

        The range is returned unchanged when there is nothing to replace, or
        when the replacement would fall below the lower bound.
        """
        upper = version_range.upper
        if not self.known_versions or upper is None or not upper.has_wildcard:
            return version_range
        resolved = self.resolve_wildcard(upper)
        if resolved.has_wildcard:
            return version_range
        lower = version_range.lower
        if lower is not None and (
            resolved < lower
            or (resolved == lower and not (version_range.lower_inclusive and version_range.upper_inclusive))
        ):
            return version_range
        return VersionRange(lower, version_range.lower_inclusive, resolved, version_range.upper_inclusive)

    def resolve_wildcard(self, version: Version) -> Version:
        """Return the highest known version matching the fixed components of ``version``.

        The qualifier family has to match too. The wildcard version is returned
        unchanged when no known version fits.
        """
        matching = [v for v in self.known_versions if v.matches_prefix(version)]
        if not matching:
            if is_debug_enabled(logger):
                logger.debug(
                    "No known version for wildcard %s",
                    version,
                    extra=extra_context(event="wildcard_unresolved", component="version_parser", target=str(version)),
                )
            return version
        return matching[-1]


def parse_version(text: str) -> Version:
    """Module-level shorthand for ``Version.parse``."""
    return Version.parse(text)


def parse_range(text: str) -> VersionRange:
    """Module-level shorthand for ``VersionRange.parse``."""
    return VersionRange.parse(text)
