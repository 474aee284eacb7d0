"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface per entity.
This allows us to:
1. Keep records on device (in memory or in a key-value blob)
2. Mirror them to a cloud collection after sign-in
3. Use in-memory storage for testing
4. Keep the repositories decoupled from any backend

Data sources speak in storage records (ExpenseRecord, IncomeRecord,
UserRecord). Converting to domain objects is the repositories' job.
"""

from abc import ABC, abstractmethod
from typing import Optional

from expense_tracker.models.transaction import (
    ExpenseRecord,
    IncomeRecord,
    UserRecord,
)


class TransactionDataSource(ABC):
    """
    Abstract interface for bulk-readable record collections.

    Expense and income sources share this shape.
    """

    @abstractmethod
    async def create(self, item) -> None:
        """
        Add a record to the collection.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def read_all(self) -> list:
        """
        Return every record in the collection.

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def update(self, item) -> None:
        """
        Replace the record with the same id.

        Raises:
            NotFoundError: If no record has this id (local sources)
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, item) -> None:
        """
        Remove the record with the same id.

        Raises:
            NotFoundError: If no record has this id (local sources)
        """
        pass

    @abstractmethod
    async def delete_all(self) -> None:
        """Remove every record. A no-op on an empty collection."""
        pass


class ExpenseDataSource(TransactionDataSource):
    """Data source holding ExpenseRecord items."""

    @abstractmethod
    async def read_all(self) -> list[ExpenseRecord]:
        pass


class IncomeDataSource(TransactionDataSource):
    """Data source holding IncomeRecord items."""

    @abstractmethod
    async def read_all(self) -> list[IncomeRecord]:
        pass


class UserDataSource(ABC):
    """
    Abstract interface for the single user profile.

    A source holds at most one user.
    """

    @abstractmethod
    async def read(self) -> Optional[UserRecord]:
        """Return the stored user, or None."""
        pass

    @abstractmethod
    async def create(self, item: UserRecord) -> None:
        pass

    @abstractmethod
    async def update(self, item: UserRecord) -> None:
        pass

    @abstractmethod
    async def delete(self, item: UserRecord) -> None:
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Record not found in storage."""
    pass


class InvalidDataError(StorageError):
    """Record could not be encoded or decoded."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate record."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
