"""Services package."""

from expense_tracker.services.storage import (
    ConnectionError,
    DuplicateError,
    ExpenseDataSource,
    GoogleSheetsClient,
    IncomeDataSource,
    InvalidDataError,
    NotFoundError,
    StorageError,
    UserDataSource,
)

__all__ = [
    "ConnectionError",
    "DuplicateError",
    "ExpenseDataSource",
    "GoogleSheetsClient",
    "IncomeDataSource",
    "InvalidDataError",
    "NotFoundError",
    "StorageError",
    "UserDataSource",
]
