"""Value type allow-list checks."""

from __future__ import annotations

from collections.abc import Collection

from app.notifications.events import Notification


def is_type_allowed(notification: Notification, allowed_value_types: Collection[str]) -> bool:
  """Return False only when an allow-list is set and excludes the notification's value type."""
  # Notifications without a value type, or with an empty one, are never filtered.
  if not allowed_value_types or not notification.value_type:
    return True

  return notification.value_type in allowed_value_types
