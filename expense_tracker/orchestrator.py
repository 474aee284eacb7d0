"""
Main Orchestrator for the Expense Tracker

This module ties the data layer to the authentication lifecycle:
1. Sign in  (attach remote → pull → push → sync user details)
2. Sign out (detach remote → forget the local user)

DESIGN DECISION: Local storage is always the source the app reads from.
The cloud side exists only while a user is signed in, and the
orchestrator is the one place that attaches and detaches it.
"""

from typing import Callable, Optional

import structlog
from pydantic import ValidationError

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import Settings, get_settings
from expense_tracker.database import DatabaseManager
from expense_tracker.models.sync import SessionSyncResult
from expense_tracker.models.transaction import User
from expense_tracker.repositories import (
    RepositoryHandler,
    google_sheets_repository_handler,
    in_memory_repository_handler,
    key_value_repository_handler,
)
from expense_tracker.services.storage import GoogleSheetsClient


logger = structlog.get_logger(__name__)

RemoteFactory = Callable[[str], RepositoryHandler]


class SessionFlow:
    """
    Orchestrates what happens to the data when the user signs in or out.

    Sign-in flow:
    1. Attach the user's cloud collections as the remote side
    2. Copy remote records missing on this device into local storage
    3. Copy local records missing in the cloud into remote storage
    4. Store the user's profile locally (cloud profile wins)

    Without a remote factory (cloud not configured) the app stays
    local-only and sign-in only stores the profile.
    """

    def __init__(
        self,
        database_manager: DatabaseManager,
        remote_factory: Optional[RemoteFactory] = None,
    ):
        self._database_manager = database_manager
        self._remote_factory = remote_factory

    @property
    def database_manager(self) -> DatabaseManager:
        return self._database_manager

    async def sign_in(self, user: User) -> SessionSyncResult:
        """Attach the cloud side for `user` and reconcile both sides."""
        manager = self._database_manager

        if self._remote_factory is not None:
            await manager.initialize_remote_repository_handler(
                self._remote_factory(user.id)
            )
        else:
            logger.info("remote_not_configured", user_id=user.id)

        pulled = await manager.sync_local_with_remote()
        pushed = await manager.sync_remote_with_local()
        stored = await manager.sync_user_details(user)

        result = SessionSyncResult(
            user_id=user.id,
            pulled=pulled,
            pushed=pushed,
            user_error=None if stored else "Failed to sync user details",
        )
        logger.info(
            "signed_in",
            user_id=user.id,
            pulled=pulled.total_created,
            pushed=pushed.total_created,
            succeeded=result.succeeded,
        )
        return result

    async def sign_out(self, user: User) -> None:
        """Detach the cloud side and forget the user on this device."""
        manager = self._database_manager
        await manager.deinitialize_remote_repository_handler()
        await manager.clear_local_user_details(user)
        logger.info("signed_out", user_id=user.id)


def create_local_handler(settings: Settings) -> RepositoryHandler:
    """Local repository handler for the configured storage backend."""
    storage = settings.storage
    if storage.backend == "in_memory":
        return in_memory_repository_handler(seed_samples=storage.seed_samples)
    return key_value_repository_handler(storage.path)


def create_remote_factory(settings: Settings) -> Optional[RemoteFactory]:
    """
    Factory building a user's cloud handler, or None if the cloud store
    is not configured.
    """
    try:
        client = GoogleSheetsClient(settings.google_sheets)
    except ValidationError as e:
        # Cloud not configured - continue local-only
        logger.warning("remote_storage_not_configured", error=str(e))
        return None

    def factory(user_id: str) -> RepositoryHandler:
        return google_sheets_repository_handler(user_id, client)

    return factory


def create_app_components(
    settings: Optional[Settings] = None,
    use_remote: bool = True,
) -> tuple[DatabaseManager, SessionFlow]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use (defaults to the cached ones)
        use_remote: Whether to wire up the cloud store.
                    Set to False for local-only runs and tests.

    Returns:
        (database_manager, session_flow)
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level)

    audit_logger = AuditLogger(history_size=app_settings.audit_history_size)
    database_manager = DatabaseManager(
        local=create_local_handler(settings),
        audit_logger=audit_logger,
    )
    remote_factory = create_remote_factory(settings) if use_remote else None

    return database_manager, SessionFlow(database_manager, remote_factory)
