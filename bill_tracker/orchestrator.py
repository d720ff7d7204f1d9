"""
Main Orchestrator for Bill Tracker

This module ties together the store, persistence and reminders and
defines the flows the UI drives:
1. Open (load saved bills -> remind about due bills)
2. Mutate (upsert / delete / toggle paid -> save)
3. View (search + status filter -> visible bills and totals)

DESIGN DECISION: The orchestrator enforces the failure boundaries:
- Validation errors block the mutation entirely
- A failed load starts with an empty list and a warning
- A failed save keeps the in-memory change and warns it may be lost
- Reminder failures are logged and never reach the user

Each mutation awaits its save before returning, so a single app
instance never has two mutations in flight.
"""

from typing import Any, Mapping, Optional, Union
from uuid import UUID

from bill_tracker.config import Settings, get_settings
from bill_tracker.core.dates import DateLike
from bill_tracker.log import get_logger
from bill_tracker.models.bill import Bill, BillInput, BillView, DueNotification, StatusFilter
from bill_tracker.notifications import (
    LogNotificationDelivery,
    NotificationDeliveryInterface,
    build_due_notification,
)
from bill_tracker.queries import compute_view
from bill_tracker.services.storage import (
    BillPersistenceInterface,
    InMemoryBillPersistence,
    create_persistence,
)
from bill_tracker.store import BillStore


LOAD_FAILED_MESSAGE = "Failed to load bills. Starting with empty list."
SAVE_FAILED_MESSAGE = "Failed to save bills. Changes may be lost."


class BillTrackerApp:
    """
    Application controller around a single BillStore.

    Mutation methods return (result, saved). saved=False means the
    change is live in memory but may not survive a restart.
    """

    def __init__(
        self,
        persistence: Optional[BillPersistenceInterface] = None,
        notifier: Optional[NotificationDeliveryInterface] = None,
        store: Optional[BillStore] = None,
        currency_symbol: str = "$",
    ):
        self._persistence = persistence or InMemoryBillPersistence()
        self._notifier = notifier
        self._store = store or BillStore()
        self._currency_symbol = currency_symbol
        self._logger = get_logger(__name__)

    @property
    def store(self) -> BillStore:
        return self._store

    @property
    def currency_symbol(self) -> str:
        return self._currency_symbol

    def set_notifier(self, notifier: Optional[NotificationDeliveryInterface]) -> None:
        self._notifier = notifier

    async def open(self, today: Optional[DateLike] = None) -> tuple[bool, Optional[DueNotification]]:
        """
        Load saved bills, then send the due-bill reminder.

        Returns:
            (loaded_ok, reminder_sent_or_None)
        """
        loaded, _ = await self.load()
        reminder = await self.notify_due(today)
        return loaded, reminder

    async def load(self) -> tuple[bool, Optional[str]]:
        """
        Replace the in-memory collection with the saved one.

        Returns:
            (ok, warning_message). On failure the collection is empty.
        """
        try:
            bills = await self._persistence.load()
        except Exception as e:
            self._logger.error("bills_load_failed", error=str(e))
            self._store.replace_all([])
            return False, LOAD_FAILED_MESSAGE

        self._store.replace_all(bills)
        self._logger.info("bills_loaded", count=len(self._store))
        return True, None

    async def save(self) -> bool:
        """Persist the current collection. Failures are reported, not retried."""
        try:
            saved = await self._persistence.save(self._store.get_all())
        except Exception as e:
            self._logger.error("bills_save_failed", error=str(e))
            return False

        if saved:
            self._logger.info("bills_saved", count=len(self._store))
        else:
            self._logger.warning("bills_save_failed", error="backend reported failure")
        return saved

    async def upsert(self, fields: Union[BillInput, Mapping[str, Any]]) -> tuple[Bill, bool]:
        """
        Create or edit a bill, then save.

        Raises:
            ValidationError: Input rejected; nothing changed or saved
        """
        bill = self._store.upsert(fields)
        return bill, await self.save()

    async def delete(self, bill_id: Union[UUID, str]) -> tuple[bool, bool]:
        """
        Delete a bill, then save.

        Returns:
            (removed, saved). Deleting an unknown id is a no-op and
            does not touch storage.
        """
        removed = self._store.delete(bill_id)
        if not removed:
            return False, True
        return True, await self.save()

    async def toggle_paid(self, bill_id: Union[UUID, str]) -> tuple[Bill, bool]:
        """
        Toggle paid state (rolling recurring bills forward), then save.

        Raises:
            NotFoundError: No bill with that id
        """
        bill = self._store.toggle_paid(bill_id)
        return bill, await self.save()

    def view(
        self,
        query: str = "",
        status_filter: Union[StatusFilter, str] = StatusFilter.ALL,
        today: Optional[DateLike] = None,
    ) -> BillView:
        """Current filtered view of the bills."""
        return compute_view(self._store.get_all(), query, status_filter, today)

    async def notify_due(self, today: Optional[DateLike] = None) -> Optional[DueNotification]:
        """
        Send one reminder for due and recently overdue bills.

        Returns the reminder that was sent, or None if nothing was due,
        permission was refused, or delivery failed.
        """
        if self._notifier is None:
            return None

        reminder = build_due_notification(
            self._store.get_all(),
            today,
            currency_symbol=self._currency_symbol,
        )

        try:
            granted = await self._notifier.check_permission()
            if not granted:
                granted = await self._notifier.request_permission()
            if not granted:
                self._logger.info("notification_permission_not_granted")
                return None

            if reminder is None:
                return None

            await self._notifier.send(reminder.title, reminder.body)
        except Exception as e:
            # Reminders are best effort
            self._logger.warning("notification_failed", error=str(e))
            return None

        self._logger.info("due_reminder_sent", bill_count=reminder.bill_count)
        return reminder


def create_app(
    settings: Optional[Settings] = None,
    notifier: Optional[NotificationDeliveryInterface] = None,
) -> BillTrackerApp:
    """
    Factory function to create the application from configuration.

    Args:
        settings: Settings to use (defaults to get_settings())
        notifier: Delivery adapter; defaults to logging reminders,
                  gated by the notifications "enabled" setting

    Falls back to in-memory storage if the configured backend
    cannot be set up.
    """
    settings = settings or get_settings()
    logger = get_logger(__name__)

    try:
        persistence = create_persistence(settings)
    except Exception as e:
        # Storage not configured - continue without it
        logger.warning("storage_not_configured", error=str(e))
        persistence = InMemoryBillPersistence()

    if notifier is None:
        notifier = LogNotificationDelivery(enabled=settings.notifications.enabled)

    return BillTrackerApp(
        persistence=persistence,
        notifier=notifier,
        currency_symbol=settings.app.currency_symbol,
    )
