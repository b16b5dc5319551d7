from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import pytest

from trivia_game import persistence
from trivia_game.persistence import (
    JsonFileStorage,
    MemoryStorage,
    SqliteStorage,
    StorageError,
    open_db,
    storage_for_path,
)


def test_memory_storage_get_set_remove() -> None:
    storage = MemoryStorage({"a": "1"})
    assert storage.get_item("a") == "1"
    storage.set_item("b", "2")
    assert storage.get_item("b") == "2"
    storage.remove_item("a")
    storage.remove_item("never-there")
    assert storage.get_item("a") is None


def test_json_file_storage_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "store.json"
    JsonFileStorage(path).set_item("k", "v")
    JsonFileStorage(path).set_item("other", "w")

    reopened = JsonFileStorage(path)
    assert reopened.get_item("k") == "v"
    assert reopened.get_item("other") == "w"
    assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v", "other": "w"}
    assert not path.with_suffix(".json.tmp").exists()


def test_json_file_storage_reads_corrupt_file_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{ this is not json", encoding="utf-8")
    storage = JsonFileStorage(path)
    assert storage.get_item("k") is None

    storage.set_item("k", "v")
    assert storage.get_item("k") == "v"


def test_json_file_storage_ignores_non_object_top_level(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert JsonFileStorage(path).get_item("k") is None


def test_json_file_storage_write_fault_raises_storage_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    storage = JsonFileStorage(blocker / "store.json")
    with pytest.raises(StorageError):
        storage.set_item("k", "v")


def test_sqlite_storage_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "store.db"
    storage = SqliteStorage(path)
    assert storage.get_item("k") is None
    storage.set_item("k", "v1")
    storage.set_item("k", "v2")
    assert SqliteStorage(path).get_item("k") == "v2"
    storage.remove_item("k")
    assert storage.get_item("k") is None


def test_sqlite_storage_corrupt_file_raises_storage_error(tmp_path: Path) -> None:
    path = tmp_path / "store.db"
    path.write_bytes(b"definitely not a sqlite database" * 64)
    with pytest.raises(StorageError):
        SqliteStorage(path).get_item("k")


def test_json_file_storage_removes_temp_file_when_replace_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "store.json"

    def _failing_replace(self: Path, target: Path) -> Path:
        raise OSError("replace refused")

    monkeypatch.setattr(Path, "replace", _failing_replace)
    with pytest.raises(StorageError):
        JsonFileStorage(path).set_item("k", "v")
    assert not path.exists()
    assert list(tmp_path.iterdir()) == []


class _TrackedConnection:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self.closed = False

    def execute(self, *args: object):
        return self._conn.execute(*args)

    def __enter__(self):
        return self._conn.__enter__()

    def __exit__(self, *exc: object):
        return self._conn.__exit__(*exc)

    def close(self) -> None:
        self.closed = True
        self._conn.close()


def test_open_db_closes_connection_on_corrupt_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "store.db"
    path.write_bytes(b"definitely not a sqlite database" * 64)
    opened: list[_TrackedConnection] = []
    real_connect = sqlite3.connect

    def _connect(target: Path) -> _TrackedConnection:
        conn = _TrackedConnection(real_connect(target))
        opened.append(conn)
        return conn

    monkeypatch.setattr(persistence.sqlite3, "connect", _connect)
    with pytest.raises(sqlite3.DatabaseError):
        open_db(path)
    assert len(opened) == 1
    assert opened[0].closed

def test_storage_for_path_picks_backend_by_suffix(tmp_path: Path) -> None:
    assert isinstance(storage_for_path(tmp_path / "lb.db"), SqliteStorage)
    assert isinstance(storage_for_path(tmp_path / "lb.sqlite"), SqliteStorage)
    assert isinstance(storage_for_path(tmp_path / "lb.json"), JsonFileStorage)
