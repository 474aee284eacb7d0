"""
In-Memory Storage Implementation

Records live in a plain list for the lifetime of the process.
Used for tests, previews, and as the base of the key-value backend,
which is the same list persisted after every change.

Every operation runs under an asyncio.Lock, so one collection has a
single writer at a time.
"""

import asyncio
from datetime import date, timedelta
from decimal import Decimal
from typing import Generic, Optional, TypeVar

from expense_tracker.models.transaction import (
    DATE_FORMAT,
    Category,
    ExpenseRecord,
    IncomeRecord,
    Source,
    UserRecord,
)
from expense_tracker.services.storage.interface import (
    DuplicateError,
    ExpenseDataSource,
    IncomeDataSource,
    NotFoundError,
    StorageError,
    UserDataSource,
)


RecordT = TypeVar("RecordT", ExpenseRecord, IncomeRecord)


class _InMemoryCollection(Generic[RecordT]):
    """List-backed record collection keyed by record id."""

    entity_type = "record"

    def __init__(self, records: Optional[list[RecordT]] = None):
        self._records: list[RecordT] = list(records or [])
        self._lock = asyncio.Lock()

    def _persist(self) -> None:
        """Hook called after every mutation."""

    def _commit(self, records: list[RecordT]) -> None:
        """Swap in the new records; keep the old ones if persisting fails."""
        previous = self._records
        self._records = records
        try:
            self._persist()
        except StorageError:
            self._records = previous
            raise

    def _index_of(self, record_id: str) -> int:
        for idx, record in enumerate(self._records):
            if record.id == record_id:
                return idx
        raise NotFoundError(f"{self.entity_type.capitalize()} not found: {record_id}")

    async def create(self, item: RecordT) -> None:
        async with self._lock:
            if any(record.id == item.id for record in self._records):
                raise DuplicateError(f"{self.entity_type.capitalize()} already exists: {item.id}")
            self._commit(self._records + [item])

    async def read_all(self) -> list[RecordT]:
        async with self._lock:
            return list(self._records)

    async def update(self, item: RecordT) -> None:
        async with self._lock:
            records = list(self._records)
            records[self._index_of(item.id)] = item
            self._commit(records)

    async def delete(self, item: RecordT) -> None:
        async with self._lock:
            records = list(self._records)
            del records[self._index_of(item.id)]
            self._commit(records)

    async def delete_all(self) -> None:
        async with self._lock:
            if not self._records:
                return
            self._commit([])


class InMemoryExpenseDataSource(_InMemoryCollection[ExpenseRecord], ExpenseDataSource):
    """Expenses held in memory."""

    entity_type = "expense"


class InMemoryIncomeDataSource(_InMemoryCollection[IncomeRecord], IncomeDataSource):
    """Incomes held in memory."""

    entity_type = "income"


class InMemoryUserDataSource(UserDataSource):
    """
    Holds a single user in memory.

    create and update overwrite the stored user; delete clears it
    whatever the id of the passed user.
    """

    def __init__(self, user: Optional[UserRecord] = None):
        self._user = user
        self._lock = asyncio.Lock()

    def _persist(self) -> None:
        """Hook called after every mutation."""

    def _commit(self, user: Optional[UserRecord]) -> None:
        previous = self._user
        self._user = user
        try:
            self._persist()
        except StorageError:
            self._user = previous
            raise

    async def read(self) -> Optional[UserRecord]:
        async with self._lock:
            return self._user

    async def create(self, item: UserRecord) -> None:
        async with self._lock:
            self._commit(item)

    async def update(self, item: UserRecord) -> None:
        async with self._lock:
            self._commit(item)

    async def delete(self, item: UserRecord) -> None:
        async with self._lock:
            self._commit(None)


# =============================================================================
# SAMPLE DATA (previews and demos)
# =============================================================================

def sample_expenses(today: Optional[date] = None) -> list[ExpenseRecord]:
    """A few expenses around the given day."""
    today = today or date.today()

    def on(days: int) -> str:
        return (today + timedelta(days=days)).strftime(DATE_FORMAT)

    return [
        ExpenseRecord(name="Groceries", amount=Decimal("2100.50"), date=on(0),
                      category=Category.FOOD.value),
        ExpenseRecord(name="Movie", amount=Decimal("1000.50"), date=on(-4),
                      category=Category.ENTERTAINMENT.value, note="The Dark Knight Rises"),
        ExpenseRecord(name="Cab", amount=Decimal("500.00"), date=on(-5),
                      category=Category.TRAVEL.value, note="To office"),
    ]


def sample_incomes(today: Optional[date] = None) -> list[IncomeRecord]:
    """A few incomes in the given day's month."""
    first = (today or date.today()).replace(day=1)
    return [
        IncomeRecord(amount=Decimal("10000.00"), date=first.strftime(DATE_FORMAT),
                     source=Source.SALARY.value),
        IncomeRecord(amount=Decimal("5000.00"), date=(first + timedelta(days=14)).strftime(DATE_FORMAT),
                     source=Source.BUSINESS.value),
        IncomeRecord(amount=Decimal("2000.00"), date=(first + timedelta(days=19)).strftime(DATE_FORMAT),
                     source=Source.INTEREST.value),
    ]
