"""Tests for the transaction views (sorting, filtering, grouping, totals)."""

import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from expense_tracker.models import Category, Source
from expense_tracker.queries import (
    AmountRange,
    SortingOption,
    TransactionFilter,
    filter_by_current_month,
    filter_by_month,
    group_by_month_year,
    month_label,
    monthly_summary,
    sort_expenses,
    sort_incomes,
    total_amount,
    total_expense,
    totals_by_category,
    totals_by_source,
)

from conftest import make_expense, make_income


@pytest.fixture
def expenses():
    return [
        make_expense(name="Groceries", amount=Decimal("2100.50"), date=date(2025, 5, 20)),
        make_expense(name="Movie", amount=Decimal("150.00"), date=date(2025, 5, 16),
                     category=Category.ENTERTAINMENT, note="The Dark Knight Rises"),
        make_expense(name="Cab", amount=Decimal("500.00"), date=date(2025, 4, 30),
                     category=Category.TRAVEL, note="To office"),
    ]


@pytest.fixture
def incomes():
    return [
        make_income(amount=Decimal("10000.00"), date=date(2025, 5, 1), source=Source.SALARY),
        make_income(amount=Decimal("2000.00"), date=date(2025, 5, 20), source=Source.INTEREST),
        make_income(amount=Decimal("5000.00"), date=date(2025, 4, 15), source=Source.BUSINESS),
    ]


class TestSorting:
    """Tests for the list-screen sort options."""

    def test_sort_by_date_newest_first(self, expenses):
        """Test the default sort is newest first."""
        assert [e.name for e in sort_expenses(expenses)] == ["Groceries", "Movie", "Cab"]

    def test_sort_by_amount_ascending(self, expenses):
        """Test ascending amount order."""
        result = sort_expenses(expenses, SortingOption.AMOUNT, descending=False)
        assert [e.amount for e in result] == [Decimal("150.00"), Decimal("500.00"), Decimal("2100.50")]

    def test_sort_by_name(self, expenses):
        """Test name order."""
        result = sort_expenses(expenses, SortingOption.NAME, descending=False)
        assert [e.name for e in result] == ["Cab", "Groceries", "Movie"]

    def test_incomes_by_name_keep_order(self, incomes):
        """Test incomes have no name, so NAME leaves them as they are."""
        assert sort_incomes(incomes, SortingOption.NAME) == incomes
        assert sort_incomes(incomes, SortingOption.AMOUNT)[0].source == Source.SALARY


class TestFiltering:
    """Tests for month and criteria filters."""

    def test_month_label(self):
        """Test the label format."""
        assert month_label(date(2025, 5, 20)) == "May 2025"

    def test_filter_by_month(self, expenses):
        """Test month matching is case-insensitive."""
        assert [e.name for e in filter_by_month(expenses, "april 2025")] == ["Cab"]
        assert filter_by_month(expenses, "May 2024") == []

    def test_filter_by_current_month(self, incomes):
        """Test the current month uses the given day."""
        result = filter_by_current_month(incomes, today=date(2025, 4, 2))
        assert [i.source for i in result] == [Source.BUSINESS]

    def test_date_range(self, expenses):
        """Test inclusive date bounds."""
        criteria = TransactionFilter(start_date=date(2025, 5, 1), end_date=date(2025, 5, 16))
        assert [e.name for e in criteria.apply(expenses)] == ["Movie"]

    def test_end_before_start_rejected(self):
        """Test an inverted range is a validation error."""
        with pytest.raises(ValidationError):
            TransactionFilter(start_date=date(2025, 5, 2), end_date=date(2025, 5, 1))

    def test_categories_only_constrain_expenses(self, expenses, incomes):
        """Test category criteria let incomes through."""
        criteria = TransactionFilter(categories=[Category.TRAVEL])
        result = criteria.apply(expenses + incomes)
        assert [getattr(t, "name", None) for t in result] == ["Cab", None, None, None]

    def test_sources_filter_incomes(self, incomes):
        """Test source criteria."""
        criteria = TransactionFilter(sources=[Source.INTEREST, Source.BUSINESS])
        assert total_amount(criteria.apply(incomes)) == Decimal("7000.00")

    def test_amount_ranges(self, expenses):
        """Test amount buckets include their bounds."""
        criteria = TransactionFilter(amount_ranges=[AmountRange.FROM_200_TO_500])
        assert [e.name for e in criteria.apply(expenses)] == ["Cab"]
        assert AmountRange.UP_TO_200.contains(Decimal("200"))

    def test_search_text(self, expenses, incomes):
        """Test search matches expense name or note, and income source."""
        assert [e.name for e in TransactionFilter(search_text="knight").apply(expenses)] == ["Movie"]
        assert len(TransactionFilter(search_text="sal").apply(incomes)) == 1

    def test_amount_range_titles(self):
        """Test bucket titles use the currency symbol."""
        assert AmountRange.UP_TO_200.title("€") == "Up to €200"
        assert AmountRange.FROM_500_TO_2000.title() == "$500 - $2000"


class TestGroupingAndTotals:
    """Tests for grouping and aggregates."""

    def test_group_by_month_year(self, expenses, incomes):
        """Test groups are newest month first."""
        groups = group_by_month_year(expenses + incomes)
        assert [label for label, _ in groups] == ["May 2025", "April 2025"]
        may = groups[0][1]
        assert may[0].date == date(2025, 5, 20)
        assert len(may) == 4

    def test_total_expense_ignores_incomes(self, expenses, incomes):
        """Test only expenses count towards the expense total."""
        assert total_expense(expenses + incomes) == Decimal("2750.50")

    def test_totals_by_category(self, expenses):
        """Test per-category totals skip empty categories."""
        totals = totals_by_category(expenses)
        assert list(totals) == [Category.FOOD, Category.ENTERTAINMENT, Category.TRAVEL]
        assert totals[Category.FOOD] == Decimal("2100.50")

    def test_totals_by_source(self, incomes):
        """Test per-source totals."""
        assert totals_by_source(incomes) == {
            Source.SALARY: Decimal("10000.00"),
            Source.INTEREST: Decimal("2000.00"),
            Source.BUSINESS: Decimal("5000.00"),
        }

    def test_monthly_summary(self, expenses, incomes):
        """Test the headline numbers of one month."""
        summary = monthly_summary(expenses, incomes, month="May 2025")
        assert summary.income == Decimal("12000.00")
        assert summary.expense == Decimal("2250.50")
        assert summary.balance == Decimal("9749.50")
        assert Category.TRAVEL not in summary.expenses_by_category
