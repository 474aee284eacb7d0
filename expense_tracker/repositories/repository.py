"""
Entity Repositories

A repository wraps one data source and translates between domain
objects (Expense, Income, User) and the storage records the data source
holds. There is no other logic here.
"""

from typing import Optional

from expense_tracker.models.transaction import Expense, Income, User
from expense_tracker.services.storage.interface import (
    ExpenseDataSource,
    IncomeDataSource,
    InvalidDataError,
    UserDataSource,
)


def _to_domain(record):
    try:
        return record.to_domain()
    except ValueError as e:
        raise InvalidDataError(f"Stored record {record.id!r} is invalid: {e}") from e


class ExpenseRepository:
    """Expenses over an ExpenseDataSource."""

    def __init__(self, data_source: ExpenseDataSource):
        self._data_source = data_source

    async def read_all(self) -> list[Expense]:
        return [_to_domain(record) for record in await self._data_source.read_all()]

    async def create(self, item: Expense) -> None:
        await self._data_source.create(item.to_record())

    async def update(self, item: Expense) -> None:
        await self._data_source.update(item.to_record())

    async def delete(self, item: Expense) -> None:
        await self._data_source.delete(item.to_record())

    async def delete_all(self) -> None:
        await self._data_source.delete_all()


class IncomeRepository:
    """Incomes over an IncomeDataSource."""

    def __init__(self, data_source: IncomeDataSource):
        self._data_source = data_source

    async def read_all(self) -> list[Income]:
        return [_to_domain(record) for record in await self._data_source.read_all()]

    async def create(self, item: Income) -> None:
        await self._data_source.create(item.to_record())

    async def update(self, item: Income) -> None:
        await self._data_source.update(item.to_record())

    async def delete(self, item: Income) -> None:
        await self._data_source.delete(item.to_record())

    async def delete_all(self) -> None:
        await self._data_source.delete_all()


class UserRepository:
    """The user profile over a UserDataSource."""

    def __init__(self, data_source: UserDataSource):
        self._data_source = data_source

    async def read(self) -> Optional[User]:
        record = await self._data_source.read()
        return _to_domain(record) if record else None

    async def create(self, item: User) -> None:
        await self._data_source.create(item.to_record())

    async def update(self, item: User) -> None:
        await self._data_source.update(item.to_record())

    async def delete(self, item: User) -> None:
        await self._data_source.delete(item.to_record())
