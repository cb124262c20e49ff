"""SQLAlchemy model for account notification preferences."""

from __future__ import annotations

from sqlalchemy import Boolean, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Preference(Base):
  """Account-level rule for one notification value type."""

  __tablename__ = "Preference"
  __table_args__ = (Index("ix_preference_account_dapp", "account", "dapp"),)

  id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
  account: Mapped[str] = mapped_column(Text, nullable=False)
  dapp: Mapped[str] = mapped_column(Text, nullable=False)
  block: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default="false")
