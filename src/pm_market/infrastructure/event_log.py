"""Event sinks: append-only `program_events` table, or the in-memory database."""

import json
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.memory_db import InMemoryDatabase
from src.pm_market.domain.events import ProgramEvent

logger = logging.getLogger(__name__)

_INSERT_EVENT_SQL = text("""
    INSERT INTO program_events (bet_id, event_type, payload)
    VALUES (:bet_id, :event_type, CAST(:payload AS JSONB))
""")


class SqlEventSink:
    async def emit(self, db: AsyncSession, event: ProgramEvent) -> None:
        await db.execute(
            _INSERT_EVENT_SQL,
            {
                "bet_id": event.bet_id,
                "event_type": event.event_type.value,
                "payload": json.dumps(event.to_payload()),
            },
        )
        logger.debug("Event queued: %s bet_id=%d", event.event_type.value, event.bet_id)


class InMemoryEventSink:
    async def emit(self, db: InMemoryDatabase, event: ProgramEvent) -> None:
        db.tables.events.append(event)
        logger.debug("Event queued: %s bet_id=%d", event.event_type.value, event.bet_id)
