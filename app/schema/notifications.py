"""SQLAlchemy model for delivered notifications."""

from __future__ import annotations

import datetime

from sqlalchemy import BigInteger, DateTime, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class SentNotification(Base):
  """One row per notification delivered to one endpoint.

  The composite primary key on (id, endpoint) is the idempotency key.
  """

  __tablename__ = "Notification"
  __table_args__ = (
    Index("ux_notification_id_endpoint", "id", "endpoint", unique=True),
    Index("ix_notification_receiver_endpoint_sent_at", "receiver", "endpoint", "sent_at"),
  )

  id: Mapped[str] = mapped_column(Text, primary_key=True)
  endpoint: Mapped[str] = mapped_column(Text, primary_key=True)
  block_height: Mapped[int] = mapped_column(BigInteger, nullable=False)
  initiated_by: Mapped[str] = mapped_column(Text, nullable=False)
  item_type: Mapped[str] = mapped_column(Text, nullable=False)
  message: Mapped[str | None] = mapped_column(Text, nullable=True)
  path: Mapped[str] = mapped_column(Text, nullable=False)
  receiver: Mapped[str] = mapped_column(Text, nullable=False)
  value_type: Mapped[str | None] = mapped_column(Text, nullable=True)
  gateway: Mapped[str | None] = mapped_column(Text, nullable=True)
  sent_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
