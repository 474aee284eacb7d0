"""Results of local/remote synchronization passes."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class SyncDirection(str, Enum):
    """Which side receives the copied records."""
    REMOTE_TO_LOCAL = "remote_to_local"
    LOCAL_TO_REMOTE = "local_to_remote"


class SyncReport(BaseModel):
    """
    Outcome of one bulk sync pass.

    A pass never raises; failures are collected in `errors` and the
    records that could not be copied are picked up by the next pass.
    """

    correlation_id: UUID = Field(default_factory=uuid4)
    direction: SyncDirection
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    skipped: bool = Field(
        default=False,
        description="True when no remote was attached"
    )
    created: dict[str, int] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)

    @property
    def total_created(self) -> int:
        return sum(self.created.values())

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def record_created(self, entity_type: str, count: int = 1) -> None:
        self.created[entity_type] = self.created.get(entity_type, 0) + count


class SessionSyncResult(BaseModel):
    """Everything that happened when a user signed in."""

    user_id: str
    pulled: SyncReport
    pushed: SyncReport
    user_error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.pulled.succeeded and self.pushed.succeeded and self.user_error is None
