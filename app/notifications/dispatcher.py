"""Dispatch of one notification to every subscribed device of its receiver."""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.config import Settings
from app.notifications.contracts import DeliveryResult, DeliveryStatus, DispatchReport, DropReason, PushDeliveryError, PushSender
from app.notifications.events import Notification
from app.notifications.filters import is_type_allowed
from app.notifications.preference_repo import PreferenceRepository
from app.notifications.push_subscription_repo import PushSubscriptionEntry, PushSubscriptionRepository
from app.notifications.sent_log_repo import SentNotificationRepository

logger = logging.getLogger(__name__)

RATE_LIMIT_WINDOW = datetime.timedelta(hours=24)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def _utcnow() -> datetime.datetime:
  return datetime.datetime.now(datetime.UTC)


@dataclass(frozen=True)
class DispatchRepositories:
  """Repositories bound to the session of one dispatch."""

  subscriptions: PushSubscriptionRepository
  preferences: PreferenceRepository
  sent_log: SentNotificationRepository

  @classmethod
  def for_session(cls, session: AsyncSession) -> DispatchRepositories:
    return cls(subscriptions=PushSubscriptionRepository(session), preferences=PreferenceRepository(session), sent_log=SentNotificationRepository(session))


class NotificationDispatcher:
  """Filters a notification, then delivers it to each subscription independently.

  A session is opened only once the value type filter passes and is closed on
  every exit path. Per-endpoint push failures are classified and never abort the
  loop; anything else (database errors included) propagates so the event gets
  redelivered.
  """

  def __init__(
    self,
    *,
    settings: Settings,
    push_sender: PushSender,
    session_factory: SessionFactory,
    repositories_factory: Callable[[AsyncSession], DispatchRepositories] = DispatchRepositories.for_session,
    clock: Callable[[], datetime.datetime] = _utcnow,
  ) -> None:
    self._settings = settings
    self._push_sender = push_sender
    self._session_factory = session_factory
    self._repositories_factory = repositories_factory
    self._clock = clock

  async def dispatch(self, notification: Notification) -> DispatchReport:
    """Run the full pipeline for one notification."""
    if not is_type_allowed(notification, self._settings.allowed_value_types):
      logger.info("Notification %s dropped due to unallowed type: %s.", notification.id, notification.value_type)
      return DispatchReport(notification_id=notification.id, drop_reason=DropReason.DISALLOWED_TYPE)

    async with self._session_factory() as session:
      repositories = self._repositories_factory(session)
      return await self._dispatch_with_repositories(notification=notification, repositories=repositories)

  async def _dispatch_with_repositories(self, *, notification: Notification, repositories: DispatchRepositories) -> DispatchReport:
    subscriptions = await repositories.subscriptions.list_for_account(account=notification.receiver)
    if not subscriptions:
      logger.info("No subscription found for %s, notificationId: %s.", notification.receiver, notification.id)
      return DispatchReport(notification_id=notification.id, drop_reason=DropReason.NO_SUBSCRIPTIONS)

    # Blocking is account-wide, so it is checked once rather than per endpoint.
    if notification.value_type:
      if await repositories.preferences.is_blocked(account=notification.receiver, value_type=notification.value_type):
        logger.info("Notification with value type %s has been blocked by the account: %s, notificationId: %s. Notification has been dropped.", notification.value_type, notification.receiver, notification.id)
        return DispatchReport(notification_id=notification.id, drop_reason=DropReason.BLOCKED_BY_PREFERENCE)

    body = notification.to_push_body()
    results: list[DeliveryResult] = []
    for subscription in subscriptions:
      results.append(await self._deliver(notification=notification, subscription=subscription, body=body, repositories=repositories))

    return DispatchReport(notification_id=notification.id, results=tuple(results))

  async def _deliver(self, *, notification: Notification, subscription: PushSubscriptionEntry, body: str, repositories: DispatchRepositories) -> DeliveryResult:
    """Deliver to one endpoint and return its terminal state."""
    endpoint = subscription.endpoint

    if await repositories.sent_log.exists(notification_id=notification.id, endpoint=endpoint):
      logger.info("Notification with id %s has been sent already to %s, endpoint: %s.", notification.id, notification.receiver, endpoint)
      return DeliveryResult(endpoint=endpoint, status=DeliveryStatus.SKIPPED_DUPLICATE)

    since = self._clock() - RATE_LIMIT_WINDOW
    sent_count = await repositories.sent_log.count_since(receiver=notification.receiver, endpoint=endpoint, since=since)
    # Strictly greater: the limit itself still lets one more through.
    if sent_count > self._settings.max_notifications_per_day:
      logger.info("Notification with id %s has been dropped for %s, endpoint: %s because the daily limit has been reached.", notification.id, notification.receiver, endpoint)
      return DeliveryResult(endpoint=endpoint, status=DeliveryStatus.SKIPPED_RATE_LIMITED)

    try:
      await run_in_threadpool(self._push_sender.send, subscription.push_subscription_object, body)
    except PushDeliveryError as exc:
      if exc.kind.is_permanent:
        logger.warning("Error (code %s). Deleting invalid subscription of receiver: %s, endpoint: %s. %s", exc.status_code, notification.receiver, endpoint, exc)
        await repositories.subscriptions.delete_by_endpoint(endpoint=endpoint)
        return DeliveryResult(endpoint=endpoint, status=DeliveryStatus.FAILED_INVALIDATED, status_code=exc.status_code)

      logger.error("Error (code %s) sending notification with id %s to %s, endpoint: %s. %s", exc.status_code, notification.id, notification.receiver, endpoint, exc)
      return DeliveryResult(endpoint=endpoint, status=DeliveryStatus.FAILED_TRANSIENT, status_code=exc.status_code)

    logger.info("Notification with id %s has been sent to receiver: %s, endpoint: %s.", notification.id, notification.receiver, endpoint)
    await repositories.sent_log.insert(notification=notification, endpoint=endpoint, gateway=subscription.gateway, sent_at=self._clock())
    return DeliveryResult(endpoint=endpoint, status=DeliveryStatus.SENT)
