"""
Repository Handler

One façade over the expense, income and user repositories of a single
storage side (local or remote). The DatabaseManager holds one handler
per side.
"""

from pathlib import Path
from typing import Optional

from expense_tracker.models.transaction import Expense, Income, User
from expense_tracker.repositories.repository import (
    ExpenseRepository,
    IncomeRepository,
    UserRepository,
)
from expense_tracker.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsExpenseDataSource,
    GoogleSheetsIncomeDataSource,
    GoogleSheetsUserDataSource,
    InMemoryExpenseDataSource,
    InMemoryIncomeDataSource,
    InMemoryUserDataSource,
    KeyValueExpenseDataSource,
    KeyValueIncomeDataSource,
    KeyValueStore,
    KeyValueUserDataSource,
    sample_expenses,
    sample_incomes,
)


class RepositoryHandler:
    """Aggregates the three repositories of one storage side."""

    def __init__(
        self,
        expense_repository: ExpenseRepository,
        income_repository: IncomeRepository,
        user_repository: UserRepository,
        name: str = "local",
    ):
        self._expenses = expense_repository
        self._incomes = income_repository
        self._users = user_repository
        self.name = name

    def __repr__(self) -> str:
        return f"RepositoryHandler(name={self.name!r})"

    # Expenses

    async def fetch_expenses(self) -> list[Expense]:
        return await self._expenses.read_all()

    async def save_expense(self, expense: Expense) -> None:
        await self._expenses.create(expense)

    async def update_expense(self, expense: Expense) -> None:
        await self._expenses.update(expense)

    async def delete_expense(self, expense: Expense) -> None:
        await self._expenses.delete(expense)

    async def delete_all_expenses(self) -> None:
        await self._expenses.delete_all()

    # Incomes

    async def fetch_incomes(self) -> list[Income]:
        return await self._incomes.read_all()

    async def save_income(self, income: Income) -> None:
        await self._incomes.create(income)

    async def update_income(self, income: Income) -> None:
        await self._incomes.update(income)

    async def delete_income(self, income: Income) -> None:
        await self._incomes.delete(income)

    async def delete_all_incomes(self) -> None:
        await self._incomes.delete_all()

    # User

    async def fetch_user(self) -> Optional[User]:
        return await self._users.read()

    async def save_user(self, user: User) -> None:
        await self._users.create(user)

    async def update_user(self, user: User) -> None:
        await self._users.update(user)

    async def delete_user(self, user: User) -> None:
        await self._users.delete(user)


def in_memory_repository_handler(
    seed_samples: bool = False,
    user: Optional[User] = None,
    name: str = "local",
) -> RepositoryHandler:
    """Handler over in-memory data sources, optionally seeded with samples."""
    return RepositoryHandler(
        ExpenseRepository(
            InMemoryExpenseDataSource(sample_expenses() if seed_samples else None)
        ),
        IncomeRepository(
            InMemoryIncomeDataSource(sample_incomes() if seed_samples else None)
        ),
        UserRepository(
            InMemoryUserDataSource(user.to_record() if user else None)
        ),
        name=name,
    )


def key_value_repository_handler(path: Path) -> RepositoryHandler:
    """Handler over the on-device key-value store at `path`."""
    store = KeyValueStore(path)
    return RepositoryHandler(
        ExpenseRepository(KeyValueExpenseDataSource(store)),
        IncomeRepository(KeyValueIncomeDataSource(store)),
        UserRepository(KeyValueUserDataSource(store)),
        name="local",
    )


def google_sheets_repository_handler(
    user_id: str,
    client: Optional[GoogleSheetsClient] = None,
) -> RepositoryHandler:
    """Handler over the signed-in user's cloud collections."""
    client = client or GoogleSheetsClient()
    return RepositoryHandler(
        ExpenseRepository(GoogleSheetsExpenseDataSource(user_id, client)),
        IncomeRepository(GoogleSheetsIncomeDataSource(user_id, client)),
        UserRepository(GoogleSheetsUserDataSource(user_id, client)),
        name="remote",
    )
