from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from .persistence import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

LEADERBOARD_KEY = "trivia_leaderboard"
LEADERBOARD_CAPACITY = 20


def _new_entry_id() -> str:
    return uuid4().hex


@dataclass(frozen=True, slots=True)
class ScoreEntry:
    name: str
    score: int
    timestamp: str  # ISO-8601, UTC
    entry_id: str = field(default_factory=_new_entry_id)

    def __post_init__(self) -> None:
        if str(self.name).strip() == "":
            raise ValueError("score entry name must be non-empty")
        if int(self.score) < 0:
            raise ValueError("score must be >= 0")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.entry_id,
            "name": self.name,
            "score": int(self.score),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: object) -> "ScoreEntry | None":
        """Parse one persisted entry; malformed entries give None."""

        if not isinstance(data, dict):
            return None
        name = str(data.get("name", "")).strip()
        # Older records stored the time under "date".
        timestamp = data.get("timestamp", data.get("date"))
        raw_score = data.get("score")
        if name == "" or not isinstance(timestamp, str):
            return None
        if isinstance(raw_score, bool) or not isinstance(raw_score, int) or raw_score < 0:
            return None
        entry_id = str(data.get("id", "")).strip() or _new_entry_id()
        return cls(name=name, score=raw_score, timestamp=timestamp, entry_id=entry_id)


_LATEST = datetime.max.replace(tzinfo=timezone.utc)


def _parse_timestamp(raw: str) -> datetime | None:
    try:
        moment = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _rank_key(entry: ScoreEntry) -> tuple[int, bool, datetime]:
    # Higher score first; equal scores: earlier timestamp first, unparsable
    # timestamps last. sorted() is stable, so ties keep arrival order.
    moment = _parse_timestamp(entry.timestamp)
    return (-int(entry.score), moment is None, moment or _LATEST)


class LeaderboardStore:
    """Ranked, capped list of ScoreEntry persisted under one storage key.

    Reads never raise: missing, unreadable or malformed data is an empty
    leaderboard. Write failures are logged and otherwise ignored.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = LEADERBOARD_KEY,
        capacity: int = LEADERBOARD_CAPACITY,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._storage = storage
        self._key = key
        self._capacity = int(capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def record(self, entry: ScoreEntry) -> int | None:
        """Insert ``entry`` and return its 1-based rank, or None if it fell off the board."""

        updated = sorted([*self._load(), entry], key=_rank_key)[: self._capacity]
        self._save(updated)

        rank = next((i + 1 for i, e in enumerate(updated) if e.entry_id == entry.entry_id), None)
        if rank is None:
            logger.info("Score %d for %r did not make the top %d", entry.score, entry.name, self._capacity)
        else:
            logger.info("Recorded score %d for %r at rank %d", entry.score, entry.name, rank)
        return rank

    def list(self, limit: int = LEADERBOARD_CAPACITY) -> list[ScoreEntry]:
        if limit <= 0:
            return []
        return self._load()[:limit]

    def clear(self) -> None:
        try:
            self._storage.remove_item(self._key)
        except StorageError as exc:
            logger.warning("Could not clear leaderboard: %s", exc)

    def _load(self) -> list[ScoreEntry]:
        try:
            raw = self._storage.get_item(self._key)
        except StorageError as exc:
            logger.warning("Could not read leaderboard: %s", exc)
            return []
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Leaderboard data under %r is not valid JSON; treating as empty", self._key)
            return []
        if not isinstance(payload, list):
            return []

        entries: list[ScoreEntry] = []
        for item in payload:
            entry = ScoreEntry.from_dict(item)
            if entry is not None:
                entries.append(entry)
        # Stored order is trusted only after re-ranking.
        return sorted(entries, key=_rank_key)[: self._capacity]

    def _save(self, entries: list[ScoreEntry]) -> None:
        payload = json.dumps([e.to_dict() for e in entries])
        try:
            self._storage.set_item(self._key, payload)
        except StorageError as exc:
            logger.warning("Could not save leaderboard: %s", exc)
