"""
Audit Logger

DESIGN DECISION: Every data change and sync pass is logged.
This provides:
1. Traceability of what was written where
2. Debugging capability when local and remote drift apart
3. A history the user can inspect

The audit logger:
- Is async to fit the data layer's call sites
- Supports correlation IDs to tie the events of one sync pass together
"""

import logging
import sys
from collections import deque
from typing import Optional
from uuid import UUID

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output to stderr at the given level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. A bounded in-memory history (for inspection)
    """

    def __init__(self, history_size: int = 500):
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("expense_tracker.audit")

    async def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        self._history.append(event)

    def recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(self._history)
        events.reverse()
        return events[:limit]

    def events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        """All retained events of one flow, in chronological order."""
        return [e for e in self._history if e.correlation_id == correlation_id]

    async def log_saved(self, entity_type: str, entity_id: str, target: str) -> None:
        await self.log(AuditEventBuilder.record_saved(entity_type, entity_id, target))

    async def log_updated(self, entity_type: str, entity_id: str, target: str) -> None:
        await self.log(AuditEventBuilder.record_updated(entity_type, entity_id, target))

    async def log_deleted(self, entity_type: str, entity_id: str, target: str) -> None:
        await self.log(AuditEventBuilder.record_deleted(entity_type, entity_id, target))

    async def log_cleared(self, entity_type: str, target: str) -> None:
        await self.log(AuditEventBuilder.collection_cleared(entity_type, target))

    async def log_sync_failed(
        self,
        direction: str,
        entity_type: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(
            AuditEventBuilder.sync_failed(
                direction=direction,
                entity_type=entity_type,
                error_message=error_message,
                correlation_id=correlation_id,
            )
        )
