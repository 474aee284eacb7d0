"""
Data Models Package

This package contains all Pydantic models used by the expense tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.transaction import (
    DATE_FORMAT,
    Category,
    Expense,
    ExpenseRecord,
    Income,
    IncomeRecord,
    Source,
    Transaction,
    User,
    UserRecord,
    new_id,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from expense_tracker.models.sync import (
    SessionSyncResult,
    SyncDirection,
    SyncReport,
)

__all__ = [
    # Transaction models
    "DATE_FORMAT",
    "Category",
    "Expense",
    "ExpenseRecord",
    "Income",
    "IncomeRecord",
    "Source",
    "Transaction",
    "User",
    "UserRecord",
    "new_id",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Sync models
    "SessionSyncResult",
    "SyncDirection",
    "SyncReport",
]
