"""Repository helpers for account notification preferences."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.schema.preferences import Preference


class PreferenceRepository:
  """Read-only access to account preferences."""

  def __init__(self, session: AsyncSession) -> None:
    self._session = session

  async def is_blocked(self, *, account: str, value_type: str) -> bool:
    """Return True when the account has blocked this value type."""
    stmt = select(Preference.id).where(Preference.account == account, Preference.dapp == value_type, Preference.block.is_(True)).limit(1)
    result = await self._session.execute(stmt)
    return result.scalar_one_or_none() is not None
