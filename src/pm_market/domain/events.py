"""Program events consumed by off-chain indexers.

Sinks are called inside the emitting operation's transaction, so an
operation that rolls back emits nothing.
"""

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Protocol

from src.pm_common.enums import EventType


@dataclass(frozen=True)
class CreateEvent:
    event_type: ClassVar[EventType] = EventType.CREATE

    creator: str
    bet_id: int
    title: str
    description: str
    end_timestamp: int
    referee: str
    share_uuid: str
    timestamp: int

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DepositEvent:
    event_type: ClassVar[EventType] = EventType.DEPOSIT

    user: str
    bet_id: int
    sol_amount: int
    token_amount: int
    is_yes: bool
    timestamp: int

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CompleteEvent:
    event_type: ClassVar[EventType] = EventType.COMPLETE

    referee: str
    bet_id: int
    winner: str  # "yes" | "no"
    timestamp: int

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


ProgramEvent = CreateEvent | DepositEvent | CompleteEvent


class EventSinkProtocol(Protocol):
    async def emit(self, db: Any, event: ProgramEvent) -> None: ...
