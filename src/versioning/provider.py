"""Sources of known platform versions.

Fetching the list from upstream belongs to the refresh collaborator; the
resolver only needs an object answering ``list_known_platform_versions``.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Union

from .version import Version


class VersionProvider(ABC):
    """Supplies the platform versions currently published."""

    @abstractmethod
    def list_known_platform_versions(self) -> List[Version]:
        """Return known versions in ascending order."""
        raise NotImplementedError

    def default_version(self) -> Optional[Version]:
        """Highest known release, or the highest known version when none is a release."""
        versions = self.list_known_platform_versions()
        releases = [v for v in versions if v.is_release]
        if releases:
            return releases[-1]
        return versions[-1] if versions else None


class StaticVersionProvider(VersionProvider):
    """Provider over a fixed list of versions (text or Version)."""

    def __init__(self, versions: Iterable[Union[str, Version]] = ()):
        parsed = [v if isinstance(v, Version) else Version.parse(v) for v in versions]
        self._versions = sorted(set(v for v in parsed if not v.has_wildcard))

    def list_known_platform_versions(self) -> List[Version]:
        return list(self._versions)
