"""Database package."""

from expense_tracker.database.manager import DatabaseManager

__all__ = ["DatabaseManager"]
