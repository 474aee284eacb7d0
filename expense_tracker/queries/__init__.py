"""Queries package."""

from expense_tracker.queries.views import (
    AmountRange,
    MonthlySummary,
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

__all__ = [
    "AmountRange",
    "MonthlySummary",
    "SortingOption",
    "TransactionFilter",
    "filter_by_current_month",
    "filter_by_month",
    "group_by_month_year",
    "month_label",
    "monthly_summary",
    "sort_expenses",
    "sort_incomes",
    "total_amount",
    "total_expense",
    "totals_by_category",
    "totals_by_source",
]
