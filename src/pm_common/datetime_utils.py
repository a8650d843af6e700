"""UTC datetime utilities and the clock source used by lifecycle operations."""

import time
from datetime import datetime, timezone
from typing import Protocol

from config.settings import settings


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


class Clock(Protocol):
    def unix_timestamp(self) -> int: ...

    def slot(self) -> int: ...


class SystemClock:
    """Wall-clock seconds; the slot advances every SLOT_DURATION_MS milliseconds."""

    def __init__(self, slot_duration_ms: int | None = None) -> None:
        self._slot_duration_ms = slot_duration_ms or settings.SLOT_DURATION_MS

    def unix_timestamp(self) -> int:
        return int(time.time())

    def slot(self) -> int:
        return int(time.time() * 1000) // self._slot_duration_ms
