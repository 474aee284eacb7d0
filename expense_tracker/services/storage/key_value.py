"""
Key-Value Storage Implementation

DESIGN DECISION: Local persistence is a single JSON file holding one
blob per key, the way a mobile app keeps small collections in its
preferences store:

    {"expenses": [...], "incomes": [...], "userDetails": {...}}

TRADEOFFS:
- The whole collection is rewritten after every change (fine for
  personal-finance volumes)
- No partial reads; a collection is loaded once when its data source
  is constructed

A missing file, a missing key, or a blob that no longer decodes loads
as an empty collection instead of failing the app start.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from expense_tracker.models.transaction import (
    ExpenseRecord,
    IncomeRecord,
    UserRecord,
)
from expense_tracker.services.storage.interface import StorageError
from expense_tracker.services.storage.memory import (
    InMemoryExpenseDataSource,
    InMemoryIncomeDataSource,
    InMemoryUserDataSource,
)


logger = structlog.get_logger(__name__)


class KeyValueKeys:
    """Keys of the persisted blobs."""
    EXPENSES = "expenses"
    INCOMES = "incomes"
    USER_DETAILS = "userDetails"


class KeyValueStore:
    """
    JSON-file backed key-value store.

    Writes go to a temporary file that atomically replaces the store,
    so a crash mid-write leaves the previous contents intact.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_file(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("key_value_store_unreadable", path=str(self._path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.warning("key_value_store_unreadable", path=str(self._path), error="not an object")
            return {}
        return data

    def _write_file(self, data: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, sort_keys=True)
                os.replace(tmp_path, self._path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._read_file().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read_file()
            data[key] = value
            self._write_file(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read_file()
            if key in data:
                del data[key]
                self._write_file(data)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._read_file())


def _load_records(store: KeyValueStore, key: str, model) -> list:
    blob = store.get(key)
    if blob is None:
        return []
    try:
        return [model.model_validate(item) for item in blob]
    except (TypeError, ValidationError) as e:
        logger.warning("key_value_blob_discarded", key=key, error=str(e))
        return []


class KeyValueExpenseDataSource(InMemoryExpenseDataSource):
    """Expenses persisted under the "expenses" key."""

    def __init__(self, store: KeyValueStore):
        self._store = store
        super().__init__(_load_records(store, KeyValueKeys.EXPENSES, ExpenseRecord))

    def _persist(self) -> None:
        self._store.set(
            KeyValueKeys.EXPENSES,
            [record.to_document() for record in self._records],
        )


class KeyValueIncomeDataSource(InMemoryIncomeDataSource):
    """Incomes persisted under the "incomes" key."""

    def __init__(self, store: KeyValueStore):
        self._store = store
        super().__init__(_load_records(store, KeyValueKeys.INCOMES, IncomeRecord))

    def _persist(self) -> None:
        self._store.set(
            KeyValueKeys.INCOMES,
            [record.to_document() for record in self._records],
        )


class KeyValueUserDataSource(InMemoryUserDataSource):
    """
    The user persisted under the "userDetails" key.

    Deleting the user removes the key.
    """

    def __init__(self, store: KeyValueStore):
        self._store = store
        user = None
        blob = store.get(KeyValueKeys.USER_DETAILS)
        if blob is not None:
            try:
                user = UserRecord.model_validate(blob)
            except ValidationError as e:
                logger.warning("key_value_blob_discarded", key=KeyValueKeys.USER_DETAILS, error=str(e))
        super().__init__(user)

    def _persist(self) -> None:
        if self._user is None:
            self._store.remove(KeyValueKeys.USER_DETAILS)
        else:
            self._store.set(KeyValueKeys.USER_DETAILS, self._user.to_document())
