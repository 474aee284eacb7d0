"""
Storage Services Package

Provides abstract data source interfaces and concrete implementations:
in-memory, a key-value JSON blob on device, and Google Sheets as the
cloud collection store.
"""

from expense_tracker.services.storage.interface import (
    ConnectionError,
    DuplicateError,
    ExpenseDataSource,
    IncomeDataSource,
    InvalidDataError,
    NotFoundError,
    StorageError,
    TransactionDataSource,
    UserDataSource,
)
from expense_tracker.services.storage.memory import (
    InMemoryExpenseDataSource,
    InMemoryIncomeDataSource,
    InMemoryUserDataSource,
    sample_expenses,
    sample_incomes,
)
from expense_tracker.services.storage.key_value import (
    KeyValueExpenseDataSource,
    KeyValueIncomeDataSource,
    KeyValueKeys,
    KeyValueStore,
    KeyValueUserDataSource,
)
from expense_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsExpenseDataSource,
    GoogleSheetsIncomeDataSource,
    GoogleSheetsUserDataSource,
)

__all__ = [
    # Interfaces
    "ExpenseDataSource",
    "IncomeDataSource",
    "TransactionDataSource",
    "UserDataSource",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "InvalidDataError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryExpenseDataSource",
    "InMemoryIncomeDataSource",
    "InMemoryUserDataSource",
    "sample_expenses",
    "sample_incomes",
    # Key-value implementation
    "KeyValueExpenseDataSource",
    "KeyValueIncomeDataSource",
    "KeyValueKeys",
    "KeyValueStore",
    "KeyValueUserDataSource",
    # Google Sheets implementation
    "GoogleSheetsClient",
    "GoogleSheetsExpenseDataSource",
    "GoogleSheetsIncomeDataSource",
    "GoogleSheetsUserDataSource",
]
