"""
Key-value backends for the app-group-scoped shared store.

The host app and the widget process each open their own backend on the same
location; neither holds a lock. Writers replace values atomically so a reader
sees either the previous record or the new one, never a torn write.
"""

from __future__ import annotations

import logging
import os
import re
import sqlite3
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from ..exceptions.errors import ConfigurationStoreError

logger = logging.getLogger(__name__)

_SAFE_NAME = re.compile(r"[^A-Za-z0-9._-]")


class KeyValueStore(ABC):
    """Byte values addressed by string keys within one namespace."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Returns the stored bytes, or None if the key was never written."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Atomically replaces the value stored under *key*."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Removes *key*; missing keys are ignored."""


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store for tests and previews."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self._data: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class FileKeyValueStore(KeyValueStore):
    """
    One file per key under ``<base_dir>/<suite>/``.

    Writes go to a temp file in the same directory which is fsynced and then
    moved over the target with ``os.replace``; a crash mid-write leaves the
    previous value untouched.
    """

    SUFFIX = ".json"

    def __init__(self, base_dir: Path, suite: str = "") -> None:
        self.directory = Path(base_dir) / _SAFE_NAME.sub("_", suite) if suite else Path(base_dir)

    def path_for(self, key: str) -> Path:
        return self.directory / (_SAFE_NAME.sub("_", key) + self.SUFFIX)

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ConfigurationStoreError(f"cannot read {path}: {exc}") from exc

    def set(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        try:
            self._atomic_write(path, value)
            logger.debug("Wrote %s (%d bytes)", path, len(value))
        except OSError as exc:
            raise ConfigurationStoreError(f"cannot write {path}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise ConfigurationStoreError(f"cannot delete {key}: {exc}") from exc

    @staticmethod
    def _atomic_write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=path.parent)
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise


class SqliteKeyValueStore(KeyValueStore):
    """
    Values in a shared SQLite file, one row per (suite, key).

    DB schema
    ---------
    CREATE TABLE shared_defaults (
        suite TEXT NOT NULL,
        key   TEXT NOT NULL,
        value BLOB NOT NULL,
        PRIMARY KEY (suite, key)
    )
    """

    def __init__(self, db_path: Path, suite: str = "") -> None:
        self.db_path = Path(db_path)
        self.suite = suite
        self._lock = threading.Lock()
        self._conn: Optional[sqlite3.Connection] = None
        try:
            self._ensure_schema()
        except sqlite3.Error as exc:
            raise ConfigurationStoreError(f"cannot open {self.db_path}: {exc}") from exc

    # ------------------------------------------------------------------ #
    #  Connection management                                             #
    # ------------------------------------------------------------------ #
    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            # bounded wait on a concurrent writer
            self._conn = sqlite3.connect(str(self.db_path), timeout=2.0, check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
        return self._conn

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def _ensure_schema(self) -> None:
        with self._lock:
            conn = self._connect()
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS shared_defaults (
                    suite TEXT NOT NULL,
                    key   TEXT NOT NULL,
                    value BLOB NOT NULL,
                    PRIMARY KEY (suite, key)
                )
                """
            )
            conn.commit()

    # ------------------------------------------------------------------ #
    #  API                                                               #
    # ------------------------------------------------------------------ #
    def get(self, key: str) -> Optional[bytes]:
        try:
            with self._lock:
                row = self._connect().execute(
                    "SELECT value FROM shared_defaults WHERE suite=? AND key=?",
                    (self.suite, key),
                ).fetchone()
        except sqlite3.Error as exc:
            raise ConfigurationStoreError(f"cannot read {key}: {exc}") from exc
        return bytes(row[0]) if row else None

    def set(self, key: str, value: bytes) -> None:
        try:
            with self._lock:
                conn = self._connect()
                with conn:
                    conn.execute(
                        """
                        INSERT INTO shared_defaults (suite, key, value)
                        VALUES (?, ?, ?)
                        ON CONFLICT(suite, key) DO UPDATE SET value=excluded.value
                        """,
                        (self.suite, key, sqlite3.Binary(value)),
                    )
        except sqlite3.Error as exc:
            raise ConfigurationStoreError(f"cannot write {key}: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            with self._lock:
                conn = self._connect()
                with conn:
                    conn.execute(
                        "DELETE FROM shared_defaults WHERE suite=? AND key=?",
                        (self.suite, key),
                    )
        except sqlite3.Error as exc:
            raise ConfigurationStoreError(f"cannot delete {key}: {exc}") from exc
