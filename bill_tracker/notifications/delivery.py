"""
Notification Delivery Interface

DESIGN DECISION: Delivery is abstract, like storage. The core only
decides *what* to remind about; adapters decide how it reaches the user
(a log line, a Streamlit toast, ...).

Reminders are a convenience, not a guarantee. Adapters may raise
NotificationError; the orchestrator logs and swallows it.
"""

from abc import ABC, abstractmethod
from typing import Optional

from bill_tracker.log import get_logger


class NotificationDeliveryInterface(ABC):
    """
    Abstract interface for reminder delivery.

    Flow used on app open:
    1. check_permission()
    2. request_permission() if not yet granted
    3. send(title, body)
    """

    @abstractmethod
    async def check_permission(self) -> bool:
        """
        Whether reminders may already be shown.

        Returns:
            True if permission is granted
        """
        pass

    @abstractmethod
    async def request_permission(self) -> bool:
        """
        Ask for permission to show reminders.

        Returns:
            True if permission was granted
        """
        pass

    @abstractmethod
    async def send(self, title: str, body: str) -> None:
        """
        Deliver a reminder. Best effort.

        Raises:
            NotificationError: If delivery fails
        """
        pass


class LogNotificationDelivery(NotificationDeliveryInterface):
    """
    Delivers reminders as structured log events.

    Permission is governed by the notifications "enabled" setting;
    requesting permission cannot change it.
    """

    def __init__(self, enabled: bool = True, logger: Optional[object] = None):
        self._enabled = enabled
        self._logger = logger or get_logger(__name__)
        self.last_sent: Optional[tuple[str, str]] = None

    async def check_permission(self) -> bool:
        return self._enabled

    async def request_permission(self) -> bool:
        return self._enabled

    async def send(self, title: str, body: str) -> None:
        self.last_sent = (title, body)
        self._logger.info("bill_reminder", title=title, body=body)
