"""
premium_clock/tests/test_clock_configuration_repository.py

Store semantics: last write wins, unreadable records fall back to the
default, and two independently opened stores on the same location see each
other's writes.
"""

from __future__ import annotations

import unittest
from dataclasses import replace
from typing import Optional

import pytest

from core.config.config_service import StorageConfig
from premium_clock.exceptions.errors import ConfigurationStoreError
from premium_clock.logic.clock_configuration_codec import encode
from premium_clock.logic.clock_configuration_repository import (
    CONFIG_KEY,
    ClockConfigurationRepository,
    open_shared_store,
)
from premium_clock.logic.storage_backends import InMemoryKeyValueStore, KeyValueStore
from premium_clock.models.clock_configuration import DEFAULT
from premium_clock.models.clock_enums import ClockLayout


class _BrokenStore(KeyValueStore):
    def get(self, key: str) -> Optional[bytes]:
        raise ConfigurationStoreError("unreadable")

    def set(self, key: str, value: bytes) -> None:
        raise ConfigurationStoreError("read-only")

    def delete(self, key: str) -> None:
        raise ConfigurationStoreError("read-only")


class TestRepository(unittest.TestCase):
    def setUp(self) -> None:
        self.backend = InMemoryKeyValueStore()
        self.repo = ClockConfigurationRepository(self.backend)

    def test_empty_store_loads_default(self) -> None:
        self.assertIs(self.repo.load(), DEFAULT)

    def test_save_then_load(self) -> None:
        cfg = replace(DEFAULT, use_24_hour_format=True, layout=ClockLayout.STACKED)
        self.repo.save(cfg)
        self.assertEqual(self.repo.load(), cfg)
        self.assertEqual(self.backend.get(CONFIG_KEY), encode(cfg))

    def test_last_write_wins(self) -> None:
        self.repo.save(replace(DEFAULT, show_seconds=False))
        self.repo.save(replace(DEFAULT, show_date=False))
        self.assertEqual(self.repo.load(), replace(DEFAULT, show_date=False))

    def test_corrupt_record_loads_default(self) -> None:
        self.backend.set(CONFIG_KEY, b'{"layout": "diagonal", "showSeconds": false}')
        self.assertIs(self.repo.load(), DEFAULT)

    def test_structurally_corrupt_record_loads_default(self) -> None:
        for record in (b"[" * 100000, b'{"showSeconds": ' + b"1" * 5000 + b"}"):
            self.backend.set(CONFIG_KEY, record)
            self.assertIs(self.repo.load(), DEFAULT)

    def test_reset(self) -> None:
        self.repo.save(replace(DEFAULT, glow_enabled=True))
        self.repo.reset()
        self.assertIs(self.repo.load(), DEFAULT)

    def test_unreadable_backend_loads_default(self) -> None:
        self.assertIs(ClockConfigurationRepository(_BrokenStore()).load(), DEFAULT)

    def test_failed_save_raises(self) -> None:
        with self.assertRaises(ConfigurationStoreError):
            ClockConfigurationRepository(_BrokenStore()).save(DEFAULT)


@pytest.mark.parametrize("backend", ["file", "sqlite"])
def test_independent_stores_share_the_record(tmp_path, backend) -> None:
    storage = StorageConfig(backend=backend, base_dir=tmp_path, app_group_id="group.test")
    host = open_shared_store(storage)
    widget = open_shared_store(storage)

    assert widget.load() is DEFAULT
    cfg = replace(DEFAULT, timezone="Europe/Berlin", show_timezone=True)
    host.save(cfg)
    assert widget.load() == cfg


def test_memory_stores_are_process_local(tmp_path) -> None:
    storage = StorageConfig(backend="memory", base_dir=tmp_path)
    first = open_shared_store(storage)
    first.save(replace(DEFAULT, show_seconds=False))
    assert open_shared_store(storage).load() is DEFAULT


def test_unknown_backend_uses_files(tmp_path) -> None:
    storage = StorageConfig(backend="redis", base_dir=tmp_path, app_group_id="g")
    open_shared_store(storage).save(DEFAULT)
    assert (tmp_path / "g" / "premiumClockConfig.json").exists()


def test_custom_config_key(tmp_path) -> None:
    storage = StorageConfig(backend="file", base_dir=tmp_path, app_group_id="g", config_key="other")
    repo = open_shared_store(storage)
    repo.save(DEFAULT)
    assert repo.key == "other"
    assert (tmp_path / "g" / "other.json").exists()
