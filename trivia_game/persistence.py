from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class StorageError(Exception):
    """A storage backend could not read or write a value."""


class KeyValueStorage(Protocol):
    """Keyed string storage, in the spirit of a browser's localStorage."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """All keys in one JSON object on disk.

    A missing or unparsable file reads as empty. Writes go through a temp file
    that replaces the existing file.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return None if value is None else str(value)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = str(value)
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self._path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring storage file %s: top level is not an object", self._path)
            return {}
        return {str(k): v for k, v in payload.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        tmp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(items, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise StorageError(f"cannot write {self._path}: {exc}") from exc


def open_db(path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(path)
    try:
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        _migrate(conn)
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def _migrate(conn: sqlite3.Connection) -> None:
    row = conn.execute("PRAGMA user_version;").fetchone()
    ver = int(row[0]) if row else 0
    if ver >= SCHEMA_VERSION:
        return

    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
            """
        )
        conn.execute(f"PRAGMA user_version={SCHEMA_VERSION};")


class SqliteStorage:
    """Key/value rows in a single SQLite table; one connection per call."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def get_item(self, key: str) -> str | None:
        try:
            conn = open_db(self._path)
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"cannot read {key!r} from {self._path}: {exc}") from exc
        return None if row is None else str(row[0])

    def set_item(self, key: str, value: str) -> None:
        self._write("INSERT OR REPLACE INTO kv(key, value) VALUES (?, ?)", (key, str(value)))

    def remove_item(self, key: str) -> None:
        self._write("DELETE FROM kv WHERE key = ?", (key,))

    def _write(self, sql: str, params: tuple[str, ...]) -> None:
        try:
            conn = open_db(self._path)
            try:
                with conn:
                    conn.execute(sql, params)
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"cannot write {self._path}: {exc}") from exc


def storage_for_path(path: Path) -> KeyValueStorage:
    """Pick a backend from the file suffix: ``.db``/``.sqlite`` or JSON."""

    if Path(path).suffix.lower() in (".db", ".sqlite", ".sqlite3"):
        return SqliteStorage(path)
    return JsonFileStorage(path)
