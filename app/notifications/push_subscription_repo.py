"""Repository helpers for Web Push subscription persistence."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.schema.push_subscriptions import Subscription


@dataclass(frozen=True)
class PushSubscriptionEntry:
  """A single web push subscription as read from storage."""

  endpoint: str
  push_subscription_object: str
  gateway: str | None
  account: str


class PushSubscriptionRepository:
  """Read and invalidate push subscriptions in Postgres."""

  def __init__(self, session: AsyncSession) -> None:
    self._session = session

  async def list_for_account(self, *, account: str) -> list[PushSubscriptionEntry]:
    """List all push subscriptions for an account."""
    # Fetch all rows so each registered device can receive the event.
    stmt = select(Subscription).where(Subscription.account == account)
    result = await self._session.execute(stmt)
    rows = result.scalars().all()
    return [PushSubscriptionEntry(endpoint=row.endpoint, push_subscription_object=row.push_subscription_object, gateway=row.gateway, account=row.account) for row in rows]

  async def delete_by_endpoint(self, *, endpoint: str) -> None:
    """Delete subscriptions by endpoint regardless of owner."""
    stmt = delete(Subscription).where(Subscription.endpoint == endpoint)
    await self._session.execute(stmt)
    await self._session.commit()
