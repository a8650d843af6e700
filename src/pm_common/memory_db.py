"""In-process database used by the "memory" storage backend.

Plays the role an AsyncSession plays for the SQL repositories: repositories
read and write its tables, and the application service calls commit() or
rollback() to end the unit of work. rollback() restores the state captured
at the last commit, so a failed operation leaves no trace.

The ledger and event logs are append-only, so they are not copied into the
snapshot; commit() records their lengths and rollback() truncates back to
them. A commit therefore costs the size of the mutable tables only.
"""

import copy
import dataclasses
from dataclasses import dataclass, field
from typing import Any

_APPEND_ONLY = ("ledger_entries", "events")


@dataclass
class _Tables:
    registry: Any = None
    accounts: dict[str, Any] = field(default_factory=dict)
    ledger_entries: list[Any] = field(default_factory=list)
    markets: dict[int, Any] = field(default_factory=dict)
    histories: dict[int, Any] = field(default_factory=dict)
    entries: dict[tuple[int, str], Any] = field(default_factory=dict)
    events: list[Any] = field(default_factory=list)


class InMemoryDatabase:
    def __init__(self) -> None:
        self.tables = _Tables()
        self._committed = self._snapshot()
        self._log_marks = {name: 0 for name in _APPEND_ONLY}

    async def commit(self) -> None:
        self._committed = self._snapshot()
        self._log_marks = {name: len(getattr(self.tables, name)) for name in _APPEND_ONLY}

    async def rollback(self) -> None:
        restored = copy.deepcopy(self._committed)
        for name, mark in self._log_marks.items():
            log = getattr(self.tables, name)
            del log[mark:]
            setattr(restored, name, log)
        self.tables = restored

    def _snapshot(self) -> _Tables:
        # Logs are swapped for empty lists so the deep copy skips them
        return copy.deepcopy(
            dataclasses.replace(self.tables, **{name: [] for name in _APPEND_ONLY})
        )
