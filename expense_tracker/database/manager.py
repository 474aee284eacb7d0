"""
Database Manager

Coordinates the local repository handler (always present) with an
optional remote one (attached after sign-in).

RULES:
- Writes go to local first, then are mirrored to remote when attached.
  A failing local write is not attempted remotely; errors propagate.
- Reads are served locally. When the local side is empty and a remote is
  attached, remote records are returned and copied into local.
- Bulk sync copies records whose id is missing on the receiving side.
  It never raises; failures are logged and reported in a SyncReport,
  and the next pass retries whatever was not copied.
- Sync passes are serialized. A pass works on a snapshot taken when it
  starts; records written meanwhile are picked up by the next pass.
"""

import asyncio
from typing import Optional

import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.models.audit import AuditEventBuilder
from expense_tracker.models.sync import SyncDirection, SyncReport
from expense_tracker.models.transaction import Expense, Income, User
from expense_tracker.repositories import RepositoryHandler
from expense_tracker.services.storage import StorageError


logger = structlog.get_logger(__name__)


class DatabaseManager:
    """Local-first CRUD and local/remote synchronization."""

    def __init__(
        self,
        local: RepositoryHandler,
        remote: Optional[RepositoryHandler] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._local = local
        self._remote = remote
        self._audit_logger = audit_logger or AuditLogger()
        self._sync_lock = asyncio.Lock()

    # =========================================================================
    # REMOTE LIFECYCLE
    # =========================================================================

    @property
    def has_remote(self) -> bool:
        return self._remote is not None

    async def initialize_remote_repository_handler(self, handler: RepositoryHandler) -> None:
        """Attach the cloud side (on sign-in)."""
        self._remote = handler
        await self._audit_logger.log(AuditEventBuilder.remote_attached())

    async def deinitialize_remote_repository_handler(self) -> None:
        """Detach the cloud side (on sign-out or going offline)."""
        self._remote = None
        await self._audit_logger.log(AuditEventBuilder.remote_detached())

    def _target(self) -> str:
        return "local and remote" if self._remote else "local"

    # =========================================================================
    # EXPENSES
    # =========================================================================

    async def fetch_expenses(self) -> list[Expense]:
        """
        Local expenses, or the remote ones when local is empty.

        Remote results are copied into local storage.
        """
        expenses = await self._local.fetch_expenses()
        if expenses:
            return expenses
        remote = self._remote
        if remote is None:
            return []
        remote_expenses = await remote.fetch_expenses()
        await self._copy_into_local("expense", remote_expenses)
        return remote_expenses

    async def save_expense(self, expense: Expense) -> bool:
        await self._local.save_expense(expense)
        if self._remote:
            await self._remote.save_expense(expense)
        await self._audit_logger.log_saved("expense", expense.id, self._target())
        return True

    async def update_expense(self, expense: Expense) -> bool:
        await self._local.update_expense(expense)
        if self._remote:
            await self._remote.update_expense(expense)
        await self._audit_logger.log_updated("expense", expense.id, self._target())
        return True

    async def delete_expense(self, expense: Expense) -> bool:
        await self._local.delete_expense(expense)
        if self._remote:
            await self._remote.delete_expense(expense)
        await self._audit_logger.log_deleted("expense", expense.id, self._target())
        return True

    async def delete_all_expenses(self) -> bool:
        await self._local.delete_all_expenses()
        if self._remote:
            await self._remote.delete_all_expenses()
        await self._audit_logger.log_cleared("expense", self._target())
        return True

    # =========================================================================
    # INCOMES
    # =========================================================================

    async def fetch_incomes(self) -> list[Income]:
        """
        Local incomes, or the remote ones when local is empty.

        Remote results are copied into local storage.
        """
        incomes = await self._local.fetch_incomes()
        if incomes:
            return incomes
        remote = self._remote
        if remote is None:
            return []
        remote_incomes = await remote.fetch_incomes()
        await self._copy_into_local("income", remote_incomes)
        return remote_incomes

    async def save_income(self, income: Income) -> bool:
        await self._local.save_income(income)
        if self._remote:
            await self._remote.save_income(income)
        await self._audit_logger.log_saved("income", income.id, self._target())
        return True

    async def update_income(self, income: Income) -> bool:
        await self._local.update_income(income)
        if self._remote:
            await self._remote.update_income(income)
        await self._audit_logger.log_updated("income", income.id, self._target())
        return True

    async def delete_income(self, income: Income) -> bool:
        await self._local.delete_income(income)
        if self._remote:
            await self._remote.delete_income(income)
        await self._audit_logger.log_deleted("income", income.id, self._target())
        return True

    async def delete_all_incomes(self) -> bool:
        await self._local.delete_all_incomes()
        if self._remote:
            await self._remote.delete_all_incomes()
        await self._audit_logger.log_cleared("income", self._target())
        return True

    # =========================================================================
    # USER DETAILS
    # =========================================================================

    async def fetch_user_details(self) -> Optional[User]:
        """Local user, falling back to the remote one."""
        user = await self._local.fetch_user()
        if user is not None:
            return user
        if self._remote is None:
            return None
        return await self._remote.fetch_user()

    async def save_user_details(self, user: User) -> bool:
        await self._local.save_user(user)
        if self._remote:
            await self._remote.save_user(user)
        await self._audit_logger.log_saved("user", user.id, self._target())
        return True

    async def update_user_details(self, user: User) -> bool:
        await self._local.update_user(user)
        if self._remote:
            await self._remote.update_user(user)
        await self._audit_logger.log_updated("user", user.id, self._target())
        return True

    async def clear_local_user_details(self, user: User) -> bool:
        """Forget the user on this device only."""
        await self._local.delete_user(user)
        await self._audit_logger.log_deleted("user", user.id, "local")
        return True

    async def sync_user_details(self, user: User) -> Optional[User]:
        """
        Bring the local user in line after sign-in.

        The remote profile wins when there is one; otherwise `user` (the
        identity provider's profile) is stored. Returns the stored user,
        or None when the sync failed.
        """
        try:
            local_user = await self._local.fetch_user()
            remote_user = await self._remote.fetch_user() if self._remote else None

            chosen = remote_user or user
            if local_user is None:
                await self._local.save_user(chosen)
            else:
                await self._local.update_user(chosen)
        except StorageError as e:
            logger.error("user_sync_failed", user_id=user.id, error=str(e))
            await self._audit_logger.log_sync_failed(
                direction=SyncDirection.REMOTE_TO_LOCAL.value,
                entity_type="user",
                error_message=str(e),
            )
            return None

        await self._audit_logger.log(
            AuditEventBuilder.user_synced(
                chosen.id, "remote" if remote_user else "identity provider"
            )
        )
        return chosen

    # =========================================================================
    # BULK SYNC
    # =========================================================================

    async def sync_local_with_remote(self) -> SyncReport:
        """Copy remote incomes and expenses missing locally into local."""
        return await self._sync(SyncDirection.REMOTE_TO_LOCAL, ("income", "expense"))

    async def sync_remote_with_local(self) -> SyncReport:
        """Copy local expenses and incomes missing remotely into remote."""
        return await self._sync(SyncDirection.LOCAL_TO_REMOTE, ("expense", "income"))

    async def _sync(self, direction: SyncDirection, entities: tuple[str, ...]) -> SyncReport:
        report = SyncReport(direction=direction)

        async with self._sync_lock:
            # Remote is read under the lock
            remote = self._remote
            if remote is None:
                report.skipped = True
                return report

            if direction == SyncDirection.REMOTE_TO_LOCAL:
                source, target = remote, self._local
            else:
                source, target = self._local, remote

            await self._audit_logger.log(
                AuditEventBuilder.sync_started(direction.value, report.correlation_id)
            )
            for entity in entities:
                await self._copy_missing(source, target, entity, report)
            await self._audit_logger.log(
                AuditEventBuilder.sync_completed(
                    direction=direction.value,
                    created=report.created,
                    errors=report.errors,
                    correlation_id=report.correlation_id,
                )
            )
        return report

    async def _copy_missing(
        self,
        source: RepositoryHandler,
        target: RepositoryHandler,
        entity: str,
        report: SyncReport,
    ) -> None:
        """Create on `target` every `entity` record of `source` it lacks."""
        report.created.setdefault(entity, 0)
        fetch_source = getattr(source, f"fetch_{entity}s")
        fetch_target = getattr(target, f"fetch_{entity}s")
        save_target = getattr(target, f"save_{entity}")

        try:
            source_items = await fetch_source()
            existing = {item.id for item in await fetch_target()}
        except StorageError as e:
            await self._record_sync_error(report, entity, str(e))
            return

        for item in source_items:
            if item.id in existing:
                continue
            try:
                await save_target(item)
            except StorageError as e:
                await self._record_sync_error(report, entity, f"{item.id}: {e}")
                continue
            existing.add(item.id)
            report.record_created(entity)

    async def _copy_into_local(self, entity: str, items: list) -> None:
        save_local = getattr(self._local, f"save_{entity}")
        for item in items:
            try:
                await save_local(item)
            except StorageError as e:
                logger.error("local_copy_failed", entity=entity, record_id=item.id, error=str(e))
                await self._audit_logger.log_sync_failed(
                    direction=SyncDirection.REMOTE_TO_LOCAL.value,
                    entity_type=entity,
                    error_message=f"{item.id}: {e}",
                )

    async def _record_sync_error(self, report: SyncReport, entity: str, message: str) -> None:
        logger.error(
            "sync_failed",
            direction=report.direction.value,
            entity=entity,
            error=message,
        )
        report.errors.append(f"{entity}: {message}")
        await self._audit_logger.log_sync_failed(
            direction=report.direction.value,
            entity_type=entity,
            error_message=message,
            correlation_id=report.correlation_id,
        )
