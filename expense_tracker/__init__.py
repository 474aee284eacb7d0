"""
Expense Tracker - Data Layer

Offline-first storage for a personal finance tracker: expenses, incomes
and the user profile live on the device and are mirrored to a cloud
store while a user is signed in.

DESIGN PRINCIPLES:
1. Local storage is always written first and always readable
2. The cloud side is optional and attached only after sign-in
3. Sync never loses a record: it only creates what is missing
4. Every write and sync pass is auditable
5. Storage backends are swappable
"""

__version__ = "1.0.0"
