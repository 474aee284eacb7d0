"""
Transaction Views

DESIGN DECISION: Views are computed DETERMINISTICALLY over lists the
DatabaseManager returns. Nothing here touches storage, so the same
functions serve the dashboard, the transaction list and the insights
screen.

Covers:
- Sorting (date, amount, name)
- Filtering (month, date range, category, source, amount bucket, search)
- Grouping by month
- Aggregates (totals per category/source, monthly balance)
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field, model_validator

from expense_tracker.models.transaction import (
    Category,
    Expense,
    Income,
    Source,
    Transaction,
)


MONTH_YEAR_FORMAT = "%B %Y"


class SortingOption(str, Enum):
    """Sort keys offered by the list screens."""
    DATE = "Date"
    AMOUNT = "Amount"
    NAME = "Name"


class AmountRange(Enum):
    """
    Amount buckets for filtering.

    Bounds are inclusive, so 200 and 500 fall into two buckets.
    """
    UP_TO_200 = (Decimal("0"), Decimal("200"))
    FROM_200_TO_500 = (Decimal("200"), Decimal("500"))
    FROM_500_TO_2000 = (Decimal("500"), Decimal("2000"))
    ABOVE_2000 = (Decimal("2000"), Decimal("9999999"))

    @property
    def lower(self) -> Decimal:
        return self.value[0]

    @property
    def upper(self) -> Decimal:
        return self.value[1]

    def title(self, currency_symbol: str = "$") -> str:
        if self is AmountRange.UP_TO_200:
            return f"Up to {currency_symbol}200"
        if self is AmountRange.ABOVE_2000:
            return f"Above {currency_symbol}2000"
        return f"{currency_symbol}{self.lower} - {currency_symbol}{self.upper}"

    def contains(self, amount: Decimal) -> bool:
        return self.lower <= abs(amount) <= self.upper


# =============================================================================
# SORTING
# =============================================================================

def sort_expenses(
    expenses: Iterable[Expense],
    option: SortingOption = SortingOption.DATE,
    descending: bool = True,
) -> list[Expense]:
    """Sort expenses; names compare case-sensitively like the list screen."""
    if option == SortingOption.DATE:
        key = lambda e: e.date
    elif option == SortingOption.AMOUNT:
        key = lambda e: e.amount
    else:
        key = lambda e: e.name
    return sorted(expenses, key=key, reverse=descending)


def sort_incomes(
    incomes: Iterable[Income],
    option: SortingOption = SortingOption.DATE,
    descending: bool = True,
) -> list[Income]:
    """Sort incomes. Incomes have no name, so NAME keeps the input order."""
    if option == SortingOption.DATE:
        return sorted(incomes, key=lambda i: i.date, reverse=descending)
    if option == SortingOption.AMOUNT:
        return sorted(incomes, key=lambda i: i.amount, reverse=descending)
    return list(incomes)


# =============================================================================
# FILTERING
# =============================================================================

def month_label(day: date) -> str:
    return day.strftime(MONTH_YEAR_FORMAT)


def filter_by_month(items: Iterable[Transaction], month: str) -> list[Transaction]:
    """Items whose "Month YYYY" label contains `month`, case-insensitively."""
    needle = month.casefold()
    return [item for item in items if needle in month_label(item.date).casefold()]


def filter_by_current_month(
    items: Iterable[Transaction],
    today: Optional[date] = None,
) -> list[Transaction]:
    return filter_by_month(items, month_label(today or date.today()))


class TransactionFilter(BaseModel):
    """
    Filters of the transactions screen.

    Unset criteria do not filter. Category criteria only constrain
    expenses and source criteria only constrain incomes.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    categories: Optional[list[Category]] = None
    sources: Optional[list[Source]] = None
    amount_ranges: Optional[list[AmountRange]] = None
    search_text: str = Field(default="")

    @model_validator(mode='after')
    def validate_dates(self) -> 'TransactionFilter':
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

    def matches(self, item: Transaction) -> bool:
        if self.start_date and item.date < self.start_date:
            return False
        if self.end_date and item.date > self.end_date:
            return False
        if self.categories is not None and isinstance(item, Expense):
            if item.category not in self.categories:
                return False
        if self.sources is not None and isinstance(item, Income):
            if item.source not in self.sources:
                return False
        if self.amount_ranges is not None:
            if not any(r.contains(item.amount) for r in self.amount_ranges):
                return False
        if self.search_text:
            needle = self.search_text.casefold()
            if isinstance(item, Income):
                return needle in item.source.value.casefold()
            return needle in item.name.casefold() or needle in item.note.casefold()
        return True

    def apply(self, items: Iterable[Transaction]) -> list[Transaction]:
        return [item for item in items if self.matches(item)]


# =============================================================================
# GROUPING
# =============================================================================

def group_by_month_year(
    items: Iterable[Transaction],
) -> list[tuple[str, list[Transaction]]]:
    """
    Group items under "Month YYYY" labels.

    Groups are ordered newest month first; items inside a group newest
    first.
    """
    groups: dict[tuple[int, int], list[Transaction]] = defaultdict(list)
    for item in items:
        groups[(item.date.year, item.date.month)].append(item)

    result = []
    for year, month in sorted(groups, reverse=True):
        members = sorted(groups[(year, month)], key=lambda t: t.date, reverse=True)
        result.append((month_label(date(year, month, 1)), members))
    return result


# =============================================================================
# AGGREGATES
# =============================================================================

def total_amount(items: Iterable[Transaction]) -> Decimal:
    return sum((item.amount for item in items), Decimal("0"))


def total_expense(items: Iterable[Transaction]) -> Decimal:
    """Sum of the expenses in a mixed list."""
    return total_amount(item for item in items if isinstance(item, Expense))


def totals_by_category(expenses: Sequence[Expense]) -> dict[Category, Decimal]:
    """Spend per category in Category order; empty categories omitted."""
    totals = {}
    for category in Category:
        matching = [e for e in expenses if e.category == category]
        if matching:
            totals[category] = total_amount(matching)
    return totals


def totals_by_source(incomes: Sequence[Income]) -> dict[Source, Decimal]:
    """Income per source in Source order; empty sources omitted."""
    totals = {}
    for source in Source:
        matching = [i for i in incomes if i.source == source]
        if matching:
            totals[source] = total_amount(matching)
    return totals


class MonthlySummary(BaseModel):
    """Headline numbers of one month."""

    month: str
    income: Decimal
    expense: Decimal
    expenses_by_category: dict[Category, Decimal] = Field(default_factory=dict)
    incomes_by_source: dict[Source, Decimal] = Field(default_factory=dict)

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


def monthly_summary(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    month: Optional[str] = None,
) -> MonthlySummary:
    """Summary of `month` ("May 2025"), the current month by default."""
    month = month or month_label(date.today())
    month_expenses = filter_by_month(expenses, month)
    month_incomes = filter_by_month(incomes, month)
    return MonthlySummary(
        month=month,
        income=total_amount(month_incomes),
        expense=total_amount(month_expenses),
        expenses_by_category=totals_by_category(month_expenses),
        incomes_by_source=totals_by_source(month_incomes),
    )
