"""Holder for the current catalog snapshot.

Readers grab ``current`` once per request and keep using that snapshot; a
refresh builds and validates the replacement off to the side and swaps the
reference in a single assignment.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from common.logging_utils import extra_context
from versioning.provider import VersionProvider

from .errors import CatalogValidationError
from .models import Catalog, RawCatalog
from .validation import validate

logger = logging.getLogger(__name__)


class CatalogHolder:
    """Owns the reference to the active Catalog.

    When a version provider is given, each refresh concretises wildcard
    ranges against the versions it currently lists.
    """

    def __init__(self, catalog: Optional[Catalog] = None, version_provider: Optional[VersionProvider] = None):
        self._current = catalog
        self.version_provider = version_provider
        self._generation = 0 if catalog is None else 1
        self._write_lock = threading.Lock()

    @property
    def current(self) -> Catalog:
        catalog = self._current
        if catalog is None:
            raise LookupError("No catalog has been loaded yet")
        return catalog

    @property
    def generation(self) -> int:
        """Number of snapshots installed so far."""
        return self._generation

    def refresh(self, raw: RawCatalog) -> Catalog:
        """Validate ``raw`` and make it the current snapshot.

        The previous snapshot stays active when validation fails.

        Raises:
            CatalogValidationError: the new catalog is invalid.
        """
        with self._write_lock:
            known = self.version_provider.list_known_platform_versions() if self.version_provider else None
            try:
                catalog = validate(raw, known)
            except CatalogValidationError as exc:
                logger.error(
                    "Catalog refresh rejected, keeping generation %d: %s",
                    self._generation,
                    exc,
                    extra=extra_context(event="catalog_refresh", component="catalog_holder", outcome="rejected"),
                )
                raise
            self._current = catalog
            self._generation += 1
            logger.info(
                "Catalog generation %d installed",
                self._generation,
                extra=extra_context(event="catalog_refresh", component="catalog_holder", outcome="installed"),
            )
            return catalog
