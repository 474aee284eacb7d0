"""
Tests for the Expense Tracker models

Test strategy:
1. Unit tests for domain models and storage records
2. Conversions between the two shapes
3. Audit events and sync reports
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from expense_tracker.models import (
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Category,
    Expense,
    ExpenseRecord,
    Income,
    IncomeRecord,
    SessionSyncResult,
    Source,
    SyncDirection,
    SyncReport,
    User,
    UserRecord,
)

from conftest import make_expense, make_income


class TestEnums:
    """Tests for Category and Source parsing."""

    def test_known_category_parses(self):
        """Test stored values map to their category."""
        assert Category.parse("Travel") == Category.TRAVEL

    def test_unknown_category_maps_to_other(self):
        """Test unknown or missing values fall back to Other."""
        assert Category.parse("Groceries") == Category.OTHER
        assert Category.parse(None) == Category.OTHER

    def test_unknown_source_maps_to_other(self):
        """Test unknown sources fall back to Other."""
        assert Source.parse("Lottery") == Source.OTHER
        assert Source.parse("Rental") == Source.RENTAL


class TestExpense:
    """Tests for the Expense domain model."""

    def test_expense_creation(self):
        """Test Expense model creation with defaults."""
        expense = Expense(name="Cab", amount=Decimal("500.00"), date=date(2025, 5, 3))
        assert expense.id
        assert expense.category == Category.OTHER
        assert expense.note == ""

    def test_ids_are_unique(self):
        """Test each new expense gets its own id."""
        assert make_expense().id != make_expense().id

    def test_name_is_stripped(self):
        """Test that whitespace is stripped from the name."""
        assert make_expense(name="  Cab  ").name == "Cab"

    def test_negative_amount_rejected(self):
        """Test amounts cannot be negative."""
        with pytest.raises(ValidationError):
            make_expense(amount=Decimal("-1.00"))

    def test_amount_precision_limited(self):
        """Test amounts carry at most two decimal places."""
        with pytest.raises(ValidationError):
            make_expense(amount=Decimal("1.005"))

    def test_expense_is_immutable(self):
        """Test domain objects are frozen."""
        expense = make_expense()
        with pytest.raises(ValidationError):
            expense.name = "Other"

    def test_to_record_uses_stored_shape(self):
        """Test the record keeps the date as text and the category under "type"."""
        expense = make_expense(category=Category.HEALTH)
        document = expense.to_record().to_document()
        assert document["type"] == "Health"
        assert "category" not in document
        assert document["date"] == "2025-05-10"
        assert document["amount"] == "100.00"


class TestExpenseRecord:
    """Tests for the stored expense shape."""

    def test_record_to_domain(self):
        """Test a stored document converts back to an Expense."""
        record = ExpenseRecord.model_validate({
            "id": "e1",
            "name": "Movie",
            "amount": "1000.50",
            "date": "2025-04-28",
            "type": "Entertainment",
            "note": "The Dark Knight Rises",
        })
        expense = record.to_domain()
        assert expense.id == "e1"
        assert expense.amount == Decimal("1000.50")
        assert expense.date == date(2025, 4, 28)
        assert expense.category == Category.ENTERTAINMENT

    def test_unknown_stored_category_loads_as_other(self):
        """Test older data with unknown categories still loads."""
        record = ExpenseRecord(name="Gift", amount=Decimal("10"), date="2025-01-01", category="Presents")
        assert record.to_domain().category == Category.OTHER

    def test_bad_date_rejected(self):
        """Test records with unparseable dates do not validate."""
        with pytest.raises(ValidationError):
            ExpenseRecord(name="Gift", amount=Decimal("10"), date="01/01/2025", category="Food")

    def test_unconvertible_values_rejected(self):
        """Test stored values the domain model refuses fail validation."""
        with pytest.raises(ValidationError):
            ExpenseRecord.model_validate(
                {"id": "e1", "name": "Gift", "amount": "-5", "date": "2025-01-01", "type": "Food"}
            )
        with pytest.raises(ValidationError):
            IncomeRecord(amount=Decimal("10"), date="2025-01-01", source="Salary", note="x" * 1001)
        with pytest.raises(ValidationError):
            UserRecord(id="")

    def test_conversion_keeps_fields(self):
        """Test domain -> record -> domain preserves the expense."""
        expense = make_expense(note="")
        assert expense.to_record().to_domain() == expense


class TestIncome:
    """Tests for Income and IncomeRecord."""

    def test_income_record_conversion(self):
        """Test the income's source is stored by value."""
        income = make_income(source=Source.BUSINESS, note="Side project")
        document = income.to_record().to_document()
        assert document["source"] == "Business"
        assert IncomeRecord.model_validate(document).to_domain() == income


class TestUser:
    """Tests for User and UserRecord."""

    def test_full_name(self):
        """Test the full name skips missing parts."""
        assert User(id="u", first_name="John", last_name="Doe").full_name == "John Doe"
        assert User(id="u", first_name="John").full_name == "John"

    def test_record_uses_camel_case_keys(self):
        """Test stored user keys are firstName and lastName."""
        user = User(id="u", email="a@b.c", first_name="John", last_name="Doe")
        document = user.to_record().to_document()
        assert document == {"id": "u", "email": "a@b.c", "firstName": "John", "lastName": "Doe"}
        assert UserRecord.model_validate(document).to_domain() == user

    def test_user_requires_id(self):
        """Test the user id cannot be empty."""
        with pytest.raises(ValidationError):
            User(id="")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_record_saved_event(self):
        """Test AuditEventBuilder.record_saved."""
        event = AuditEventBuilder.record_saved("expense", "e1", "local")
        assert event.event_type == AuditEventType.RECORD_SAVED
        assert event.entity_type == "expense"
        assert event.entity_id == "e1"

    def test_sync_failed_event_is_error(self):
        """Test failed syncs are logged at error severity."""
        cid = uuid4()
        event = AuditEventBuilder.sync_failed(
            direction=SyncDirection.LOCAL_TO_REMOTE.value,
            entity_type="income",
            error_message="boom",
            correlation_id=cid,
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.correlation_id == cid
        assert event.to_log_dict()["error_message"] == "boom"


class TestSyncReport:
    """Tests for sync results."""

    def test_record_created_counts(self):
        """Test created counts add up per entity."""
        report = SyncReport(direction=SyncDirection.REMOTE_TO_LOCAL)
        report.record_created("expense")
        report.record_created("expense")
        report.record_created("income")
        assert report.created == {"expense": 2, "income": 1}
        assert report.total_created == 3
        assert report.succeeded

    def test_session_result_fails_on_any_error(self):
        """Test a sign-in result fails when any step failed."""
        pulled = SyncReport(direction=SyncDirection.REMOTE_TO_LOCAL)
        pushed = SyncReport(direction=SyncDirection.LOCAL_TO_REMOTE, errors=["expense: boom"])
        result = SessionSyncResult(user_id="u", pulled=pulled, pushed=pushed)
        assert not result.succeeded
