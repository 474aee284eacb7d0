"""
Core Data Models for the Expense Tracker

These models define the shapes the rest of the application works with.
They are designed to:
1. Enforce type safety at runtime
2. Be serializable for local and cloud storage
3. Keep the storage representation separate from the domain one

DESIGN DECISION: Domain objects (Expense, Income, User) use real types
(Decimal, date, enums). Storage records (ExpenseRecord, IncomeRecord,
UserRecord) keep the flat, string-typed shape that is written to the
key-value blob and the cloud collections, so older data with unknown
categories still loads.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


DATE_FORMAT = "%Y-%m-%d"


def new_id() -> str:
    """Generate a new record identifier."""
    return str(uuid4())


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """Expense categories."""
    FOOD = "Food"
    ENTERTAINMENT = "Entertainment"
    TRAVEL = "Travel"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Category":
        """Map a stored raw value to a category, defaulting to OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class Source(str, Enum):
    """Income sources."""
    SALARY = "Salary"
    INTEREST = "Interest"
    RENTAL = "Rental"
    BUSINESS = "Business"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Source":
        """Map a stored raw value to a source, defaulting to OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# =============================================================================
# DOMAIN MODELS
# =============================================================================

Amount = Annotated[Decimal, Field(ge=0, decimal_places=2)]


class Expense(BaseModel):
    """
    A single expense entry.

    Created by user input, mutated by the edit form, deleted by swipe.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique expense ID"
    )
    name: str = Field(
        ...,
        max_length=200,
        description="What the money was spent on"
    )
    amount: Amount
    date: date
    category: Category = Category.OTHER
    note: str = Field(
        default="",
        max_length=1000,
    )

    def to_record(self) -> "ExpenseRecord":
        return ExpenseRecord(
            id=self.id,
            name=self.name,
            amount=self.amount,
            date=self.date.strftime(DATE_FORMAT),
            category=self.category.value,
            note=self.note,
        )


class Income(BaseModel):
    """A single income entry."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(default_factory=new_id, min_length=1)
    amount: Amount
    date: date
    source: Source = Source.OTHER
    note: str = Field(default="", max_length=1000)

    def to_record(self) -> "IncomeRecord":
        return IncomeRecord(
            id=self.id,
            amount=self.amount,
            date=self.date.strftime(DATE_FORMAT),
            source=self.source.value,
            note=self.note,
        )


class User(BaseModel):
    """
    Profile of the signed-in user.

    Mirrors the identity provider's profile; the id is the provider's uid.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(..., min_length=1)
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts)

    def to_record(self) -> "UserRecord":
        return UserRecord(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
        )


Transaction = Union[Expense, Income]


# =============================================================================
# STORAGE RECORDS
# =============================================================================

class _StoredRecord(BaseModel):
    """
    Base of the storage records.

    A record that cannot become a domain object (bad date, negative
    amount, over-long text) fails validation, so every reader treats it
    like any other undecodable data.
    """
    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode='after')
    def validate_domain_conversion(self):
        try:
            self.to_domain()
        except ValueError as e:
            raise ValueError(f"Record {self.id!r} does not convert: {e}") from e
        return self

    def to_domain(self):
        raise NotImplementedError

    def to_document(self) -> dict:
        """Serialize for storage (JSON-compatible, stored key names)."""
        return self.model_dump(mode="json", by_alias=True)


class ExpenseRecord(_StoredRecord):
    """
    Stored shape of an expense.

    The category is persisted under the key "type".
    """

    id: str = Field(default_factory=new_id)
    name: str
    amount: Decimal
    date: str
    category: str = Field(alias="type")
    note: str = ""

    def to_domain(self) -> Expense:
        return Expense(
            id=self.id,
            name=self.name,
            amount=self.amount,
            date=_parse_date(self.date),
            category=Category.parse(self.category),
            note=self.note,
        )


class IncomeRecord(_StoredRecord):
    """Stored shape of an income."""

    id: str = Field(default_factory=new_id)
    amount: Decimal
    date: str
    source: str
    note: str = ""

    def to_domain(self) -> Income:
        return Income(
            id=self.id,
            amount=self.amount,
            date=_parse_date(self.date),
            source=Source.parse(self.source),
            note=self.note,
        )


class UserRecord(_StoredRecord):
    """Stored shape of the user profile."""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")

    def to_domain(self) -> User:
        return User(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
        )


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise ValueError(f"Invalid date format: {value!r}") from e
