"""Repositories package."""

from expense_tracker.repositories.repository import (
    ExpenseRepository,
    IncomeRepository,
    UserRepository,
)
from expense_tracker.repositories.handler import (
    RepositoryHandler,
    google_sheets_repository_handler,
    in_memory_repository_handler,
    key_value_repository_handler,
)

__all__ = [
    "ExpenseRepository",
    "IncomeRepository",
    "UserRepository",
    "RepositoryHandler",
    "google_sheets_repository_handler",
    "in_memory_repository_handler",
    "key_value_repository_handler",
]
