"""Factory helpers for notification dispatch."""

from __future__ import annotations

from app.config import Settings
from app.core.database import get_session_factory
from app.notifications.dispatcher import NotificationDispatcher
from app.notifications.push_sender import VapidConfig, WebPushSender


def build_push_sender(settings: Settings) -> WebPushSender:
  """Construct the VAPID-signed Web Push sender."""
  vapid_config = VapidConfig(public_key=settings.vapid_public_key, private_key=settings.vapid_private_key, sub=settings.vapid_subject)
  return WebPushSender(vapid_config=vapid_config, timeout_seconds=settings.push_timeout_seconds, ttl_seconds=settings.push_ttl_seconds)


def build_notification_dispatcher(settings: Settings) -> NotificationDispatcher:
  """Construct a dispatcher backed by Postgres and pywebpush."""
  return NotificationDispatcher(settings=settings, push_sender=build_push_sender(settings), session_factory=get_session_factory())
