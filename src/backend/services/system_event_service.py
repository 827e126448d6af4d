"""System event service: writes the append-only event log."""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from core.decorators import log_database_operation, transactional_database_operation
from core.metrics import track_system_event
from db.models import SystemEvent
from models.model_enum import SystemEventType

logger = logging.getLogger(__name__)


class SystemEventService:
    """Service for recording system events."""

    @staticmethod
    @transactional_database_operation("record_system_event")
    @log_database_operation("system event recording", level="debug")
    async def record_event(
        db: AsyncSession,
        *,
        event_type: SystemEventType,
        title: str,
        message: str,
        source: str,
        severity: str = "MEDIUM",
        details: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> SystemEvent:
        """
        Append one event row and commit it on its own.

        Callers write their primary row first; the event commit is separate,
        so a failure here never rolls back the primary write.
        """
        event = SystemEvent(
            type=SystemEventType(event_type).value,
            title=title,
            message=message,
            details=details,
            severity=severity,
            source=source,
            event_metadata=metadata,
        )
        db.add(event)
        await db.flush()

        track_system_event(event.type)
        logger.info(f"System event recorded: [{event.type}] {title} ({source})")
        return event
