"""Append domain events to wal_events within the caller's transaction."""

import json
import logging
from collections.abc import Iterable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_common.events import DomainEvent

logger = logging.getLogger(__name__)

_INSERT_WAL_SQL = text("""
    INSERT INTO wal_events (round_id, event_type, payload)
    VALUES (:round_id, :event_type, CAST(:payload AS JSONB))
""")


async def write_event(event: DomainEvent, db: AsyncSession) -> None:
    """Insert one event row; the round_id column is NULL for config events."""
    payload = event.to_payload()
    await db.execute(
        _INSERT_WAL_SQL,
        {
            "round_id": event.round_id_ref,
            "event_type": event.event_type.value,
            "payload": json.dumps(payload),
        },
    )
    logger.info("event %s %s", event.event_type.value, payload)


async def write_events(events: Iterable[DomainEvent], db: AsyncSession) -> None:
    for event in events:
        await write_event(event, db)
