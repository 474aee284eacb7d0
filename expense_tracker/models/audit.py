"""
Audit Models for the Expense Tracker

Every data change and every sync pass is recorded as an audit event.
This provides:
1. Traceability of local and remote writes
2. Debugging information when a sync pass partially fails
3. A history the settings screen can show

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Persistence
    RECORD_SAVED = "record_saved"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    COLLECTION_CLEARED = "collection_cleared"

    # Remote lifecycle
    REMOTE_ATTACHED = "remote_attached"
    REMOTE_DETACHED = "remote_detached"

    # Synchronization
    SYNC_STARTED = "sync_started"
    SYNC_COMPLETED = "sync_completed"
    SYNC_FAILED = "sync_failed"
    USER_SYNCED = "user_synced"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about? ("expense", "income", "user")
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    # Ties together the events of one sign-in or one sync pass
    correlation_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_saved("expense", expense.id, "local")
        event = AuditEventBuilder.sync_started("local_to_remote", correlation_id)
    """

    @staticmethod
    def record_saved(entity_type: str, entity_id: str, target: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_SAVED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} saved to {target}",
            details={"target": target},
        )

    @staticmethod
    def record_updated(entity_type: str, entity_id: str, target: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} updated in {target}",
            details={"target": target},
        )

    @staticmethod
    def record_deleted(entity_type: str, entity_id: str, target: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} deleted from {target}",
            details={"target": target},
        )

    @staticmethod
    def collection_cleared(entity_type: str, target: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            description=f"All {entity_type} records deleted from {target}",
            details={"target": target},
        )

    @staticmethod
    def remote_attached() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMOTE_ATTACHED,
            description="Remote repository attached",
        )

    @staticmethod
    def remote_detached() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMOTE_DETACHED,
            description="Remote repository detached",
        )

    @staticmethod
    def sync_started(direction: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_STARTED,
            correlation_id=correlation_id,
            description=f"Sync started: {direction}",
            details={"direction": direction},
        )

    @staticmethod
    def sync_completed(
        direction: str,
        created: dict[str, int],
        errors: list[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_COMPLETED,
            severity=AuditSeverity.WARNING if errors else AuditSeverity.INFO,
            correlation_id=correlation_id,
            description=f"Sync finished: {direction} created {sum(created.values())} records",
            details={
                "direction": direction,
                "created": created,
                "error_count": len(errors),
            },
        )

    @staticmethod
    def sync_failed(
        direction: str,
        entity_type: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=entity_type,
            correlation_id=correlation_id,
            description=f"Error synchronizing {entity_type}: {direction}",
            error_message=error_message,
            details={"direction": direction},
        )

    @staticmethod
    def user_synced(user_id: str, source: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_SYNCED,
            entity_type="user",
            entity_id=user_id,
            description=f"User details synced from {source}",
            details={"source": source},
        )
