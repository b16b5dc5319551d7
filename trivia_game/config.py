from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .leaderboard import LEADERBOARD_CAPACITY, LEADERBOARD_KEY
from .session import DEFAULT_BATCH_SIZE

LEADERBOARD_PATH_ENV = "TRIVIA_LEADERBOARD_PATH"
QUESTION_BANK_PATH_ENV = "TRIVIA_QUESTION_BANK_PATH"
BATCH_SIZE_ENV = "TRIVIA_BATCH_SIZE"
DISABLE_SOUND_ENV = "TRIVIA_DISABLE_SOUND"


def default_leaderboard_path() -> Path:
    return Path.home() / ".trivia_game_leaderboard.json"


@dataclass(frozen=True, slots=True)
class TriviaConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    leaderboard_capacity: int = LEADERBOARD_CAPACITY
    leaderboard_display_limit: int = 10
    leaderboard_key: str = LEADERBOARD_KEY
    leaderboard_path: Path | None = None  # None -> default_leaderboard_path()
    question_bank_path: Path | None = None  # None -> built-in bank
    sound_enabled: bool = True

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError("batch_size must be > 0")
        if self.leaderboard_capacity <= 0:
            raise ValueError("leaderboard_capacity must be > 0")
        if self.leaderboard_display_limit < 0:
            raise ValueError("leaderboard_display_limit must be >= 0")
        if self.leaderboard_key.strip() == "":
            raise ValueError("leaderboard_key must be non-empty")

    def resolved_leaderboard_path(self) -> Path:
        return self.leaderboard_path or default_leaderboard_path()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TriviaConfig":
        env = os.environ if environ is None else environ

        leaderboard_path: Path | None = None
        explicit = env.get(LEADERBOARD_PATH_ENV, "").strip()
        if explicit:
            leaderboard_path = Path(explicit).expanduser()

        bank_path: Path | None = None
        explicit = env.get(QUESTION_BANK_PATH_ENV, "").strip()
        if explicit:
            bank_path = Path(explicit).expanduser()

        batch_size = DEFAULT_BATCH_SIZE
        raw_batch = env.get(BATCH_SIZE_ENV, "").strip()
        if raw_batch:
            try:
                batch_size = int(raw_batch)
            except ValueError as exc:
                raise ValueError(f"{BATCH_SIZE_ENV} must be an integer, got {raw_batch!r}") from exc

        return cls(
            batch_size=batch_size,
            leaderboard_path=leaderboard_path,
            question_bank_path=bank_path,
            sound_enabled=env.get(DISABLE_SOUND_ENV, "0") != "1",
        )
