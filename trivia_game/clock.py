from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Wall clock abstraction.

    Core logic depends on this interface rather than calling real time directly.
    """

    def now(self) -> datetime:
        """Return the current time as an aware UTC datetime."""


class RealClock:
    """Production clock backed by datetime.now(timezone.utc)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
