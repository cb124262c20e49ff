"""Schema package exports."""

from .notifications import SentNotification
from .preferences import Preference
from .push_subscriptions import Subscription

__all__ = ["Preference", "SentNotification", "Subscription"]
