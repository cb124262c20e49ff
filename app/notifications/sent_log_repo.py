"""Repository helpers for the delivered-notification log."""

from __future__ import annotations

import datetime
import logging

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.notifications.events import Notification
from app.schema.notifications import SentNotification

logger = logging.getLogger(__name__)


class SentNotificationRepository:
  """Persist and query delivered notifications in Postgres."""

  def __init__(self, session: AsyncSession) -> None:
    self._session = session

  async def exists(self, *, notification_id: str, endpoint: str) -> bool:
    """Return True when this notification was already delivered to the endpoint."""
    stmt = select(SentNotification.id).where(SentNotification.id == notification_id, SentNotification.endpoint == endpoint).limit(1)
    result = await self._session.execute(stmt)
    return result.scalar_one_or_none() is not None

  async def count_since(self, *, receiver: str, endpoint: str, since: datetime.datetime) -> int:
    """Count deliveries to an account's endpoint at or after `since`."""
    stmt = select(func.count()).select_from(SentNotification).where(SentNotification.receiver == receiver, SentNotification.endpoint == endpoint, SentNotification.sent_at >= since)
    result = await self._session.execute(stmt)
    return int(result.scalar_one())

  async def insert(self, *, notification: Notification, endpoint: str, gateway: str | None, sent_at: datetime.datetime) -> None:
    """Record a delivery; a concurrent duplicate for the same key is ignored."""
    stmt = insert(SentNotification).values(
      id=notification.id,
      endpoint=endpoint,
      block_height=notification.block_height,
      initiated_by=notification.initiated_by,
      item_type=notification.item_type,
      message=notification.message,
      path=notification.path,
      receiver=notification.receiver,
      value_type=notification.value_type,
      gateway=gateway,
      sent_at=sent_at,
    )
    stmt = stmt.on_conflict_do_nothing(index_elements=["id", "endpoint"])
    result = await self._session.execute(stmt)
    await self._session.commit()
    if result.rowcount == 0:
      logger.warning("Sent record already existed id=%s endpoint=%s", notification.id, endpoint)
