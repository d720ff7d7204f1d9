"""Due-bill reminders: selection and delivery."""

from bill_tracker.notifications.delivery import (
    LogNotificationDelivery,
    NotificationDeliveryInterface,
)
from bill_tracker.notifications.selector import (
    MAX_NOTIFICATION_ITEMS,
    OVERDUE_WINDOW_DAYS,
    build_due_notification,
    format_due_line,
    select_due,
)

__all__ = [
    "LogNotificationDelivery",
    "MAX_NOTIFICATION_ITEMS",
    "NotificationDeliveryInterface",
    "OVERDUE_WINDOW_DAYS",
    "build_due_notification",
    "format_due_line",
    "select_due",
]
