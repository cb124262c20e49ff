"""SQLAlchemy model for browser Web Push subscriptions."""

from __future__ import annotations

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Subscription(Base):
  """Persist a single browser push subscription endpoint for an account."""

  __tablename__ = "Subscription"

  endpoint: Mapped[str] = mapped_column(Text, primary_key=True)
  push_subscription_object: Mapped[str] = mapped_column(Text, nullable=False)
  gateway: Mapped[str | None] = mapped_column(Text, nullable=True)
  account: Mapped[str] = mapped_column(Text, index=True, nullable=False)
