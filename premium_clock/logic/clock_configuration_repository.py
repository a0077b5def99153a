"""
ClockConfigurationRepository
----------------------------
Persistence of the premium clock configuration in the app-group-scoped
shared store.

Strategy:
- The backend is injected; the host app and the widget process each build
  their own repository on the same shared location.
- ``save`` encodes and atomically replaces the stored record.
- ``load`` never raises: a missing, unreadable or undecodable record yields
  ``DEFAULT`` and a log line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..exceptions.errors import ConfigurationStoreError
from ..models.clock_configuration import DEFAULT, ClockConfiguration
from .clock_configuration_codec import decode_or_default, encode
from .storage_backends import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    SqliteKeyValueStore,
)

logger = logging.getLogger(__name__)

CONFIG_KEY = "premiumClockConfig"


class ClockConfigurationRepository:
    """
    Loads and saves the ClockConfiguration under one key of a shared store.
    """

    def __init__(self, backend: KeyValueStore, key: str = CONFIG_KEY) -> None:
        self._backend = backend
        self.key = key

    # --- Public API ---------------------------------------------------------

    def load(self) -> ClockConfiguration:
        """
        Returns the last successfully saved configuration, or ``DEFAULT``.
        """
        try:
            data = self._backend.get(self.key)
        except ConfigurationStoreError as exc:
            logger.warning("Shared store unreadable, using default clock config: %s", exc)
            return DEFAULT
        return decode_or_default(data)

    def save(self, config: ClockConfiguration) -> None:
        """
        Persists *config* atomically (last write wins).

        Raises:
            ConfigurationStoreError: if the backend cannot be written.
        """
        data = encode(config)
        self._backend.set(self.key, data)
        logger.info("Clock config saved (%d bytes)", len(data))

    def reset(self) -> None:
        """Forgets the saved record; subsequent loads return ``DEFAULT``."""
        self._backend.delete(self.key)
        logger.info("Clock config reset to defaults")


def open_shared_store(storage: Optional[object] = None) -> ClockConfigurationRepository:
    """
    Builds the repository described by the ``[Storage]`` configuration.

    Args:
        storage: A ``StorageConfig``; defaults to the application config.

    Backends: ``file`` (one JSON file per key), ``sqlite`` (shared database
    file) or ``memory`` (process-local, for demos and tests).
    """
    if storage is None:
        from core.config.config_service import get_config_service
        storage = get_config_service().storage

    backend_name = str(getattr(storage, "backend", "file")).strip().lower()
    base_dir = Path(getattr(storage, "base_dir", Path(".")))
    suite = str(getattr(storage, "app_group_id", ""))
    key = str(getattr(storage, "config_key", CONFIG_KEY)) or CONFIG_KEY

    backend: KeyValueStore
    if backend_name == "sqlite":
        backend = SqliteKeyValueStore(base_dir / "shared_defaults.db", suite)
    elif backend_name == "memory":
        backend = InMemoryKeyValueStore()
    else:
        if backend_name != "file":
            logger.warning("Unknown storage backend %r, using 'file'", backend_name)
        backend = FileKeyValueStore(base_dir, suite)

    logger.debug("Opened %s store for suite %r", backend_name, suite)
    return ClockConfigurationRepository(backend, key)
