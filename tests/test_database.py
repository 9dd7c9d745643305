"""Tests for the SQLite key-value store."""

import pytest

from core.database import SqliteKeyValueStore
from core.errors import StoreError


def test_get_missing_key(kv_store):
    assert kv_store.get("missing") is None


def test_set_overwrites(kv_store):
    kv_store.set("key", "one")
    kv_store.set("key", "two")
    assert kv_store.get("key") == "two"


def test_delete(kv_store):
    kv_store.set("key", "value")
    kv_store.delete("key")
    kv_store.delete("key")
    assert kv_store.get("key") is None


def test_values_survive_new_instances(tmp_path):
    SqliteKeyValueStore(tmp_path / "state.db").set("key", "value")
    assert SqliteKeyValueStore(tmp_path / "state.db").get("key") == "value"


def test_unusable_path_is_store_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    store = SqliteKeyValueStore(blocker / "state.db")
    with pytest.raises(StoreError):
        store.get("key")
