"""
Shared fixtures.

No test talks to Google: the cloud data sources run against
FakeSheetsClient, which keeps worksheets as lists of string rows.
"""

import asyncio
from datetime import date
from decimal import Decimal

import pytest
from gspread.utils import a1_to_rowcol

from expense_tracker.audit import AuditLogger
from expense_tracker.database import DatabaseManager
from expense_tracker.models import Category, Expense, Income, Source, User
from expense_tracker.repositories import (
    google_sheets_repository_handler,
    in_memory_repository_handler,
)


def run(coro):
    """Drive a coroutine to completion."""
    return asyncio.run(coro)


class FakeWorksheet:
    """The subset of gspread.Worksheet the cloud data sources use."""

    def __init__(self, title: str, header: list[str]):
        self.title = title
        self.rows: list[list[str]] = [list(header)]
        self.fail_appends = False

    def get_all_values(self) -> list[list[str]]:
        return [list(row) for row in self.rows]

    def append_row(self, row, value_input_option=None):
        if self.fail_appends:
            raise RuntimeError("quota exceeded")
        self.rows.append([str(v) for v in row])

    def batch_update(self, data, value_input_option=None):
        for update in data:
            start = update["range"].split(":")[0]
            row_number, _ = a1_to_rowcol(start)
            self.rows[row_number - 1] = list(update["values"][0])

    def delete_rows(self, start_index, end_index=None):
        end_index = end_index or start_index
        del self.rows[start_index - 1:end_index]


class FakeSheetsClient:
    """Stands in for GoogleSheetsClient."""

    collection_root = "users"

    def __init__(self):
        self.sheets: dict[str, FakeWorksheet] = {}

    def get_collection(self, title, columns):
        if title not in self.sheets:
            self.sheets[title] = FakeWorksheet(title, columns)
        return self.sheets[title]


@pytest.fixture
def sheets_client():
    return FakeSheetsClient()


@pytest.fixture
def local_handler():
    return in_memory_repository_handler()


@pytest.fixture
def remote_handler(sheets_client):
    return google_sheets_repository_handler("uid-1", sheets_client)


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def manager(local_handler, audit_logger):
    return DatabaseManager(local=local_handler, audit_logger=audit_logger)


@pytest.fixture
def user():
    return User(id="uid-1", email="johndoe@example.com", first_name="John", last_name="Doe")


def make_expense(**overrides) -> Expense:
    fields = dict(
        name="Groceries",
        amount=Decimal("100.00"),
        date=date(2025, 5, 10),
        category=Category.FOOD,
        note="Weekly shopping",
    )
    fields.update(overrides)
    return Expense(**fields)


def make_income(**overrides) -> Income:
    fields = dict(
        amount=Decimal("10000.00"),
        date=date(2025, 5, 1),
        source=Source.SALARY,
    )
    fields.update(overrides)
    return Income(**fields)
