"""Adopt or create the Notification, Subscription and Preference tables.

Revision ID: 5e2b7c91d4a0
Revises:
Create Date: 2026-10-18 09:12:41.118204
"""

from __future__ import annotations

import sqlalchemy as sa
from app.core.migration_guards import guarded_create_index, guarded_create_table, guarded_drop_index, guarded_drop_table

revision = "5e2b7c91d4a0"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
  """Upgrade schema."""
  guarded_create_table(
    "Subscription",
    sa.Column("endpoint", sa.Text(), nullable=False),
    sa.Column("push_subscription_object", sa.Text(), nullable=False),
    sa.Column("gateway", sa.Text(), nullable=True),
    sa.Column("account", sa.Text(), nullable=False),
    sa.PrimaryKeyConstraint("endpoint"),
  )
  guarded_create_index("ix_Subscription_account", "Subscription", ["account"], unique=False)

  guarded_create_table(
    "Notification",
    sa.Column("id", sa.Text(), nullable=False),
    sa.Column("endpoint", sa.Text(), nullable=False),
    sa.Column("block_height", sa.BigInteger(), nullable=False),
    sa.Column("initiated_by", sa.Text(), nullable=False),
    sa.Column("item_type", sa.Text(), nullable=False),
    sa.Column("message", sa.Text(), nullable=True),
    sa.Column("path", sa.Text(), nullable=False),
    sa.Column("receiver", sa.Text(), nullable=False),
    sa.Column("value_type", sa.Text(), nullable=True),
    sa.Column("gateway", sa.Text(), nullable=True),
    sa.Column("sent_at", sa.DateTime(timezone=True), nullable=False),
    sa.PrimaryKeyConstraint("id", "endpoint"),
  )
  # An adopted table may lack the primary key, and ON CONFLICT needs a unique index to infer.
  guarded_create_index("ux_notification_id_endpoint", "Notification", ["id", "endpoint"], unique=True)
  guarded_create_index("ix_notification_receiver_endpoint_sent_at", "Notification", ["receiver", "endpoint", "sent_at"], unique=False)

  guarded_create_table(
    "Preference",
    sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
    sa.Column("account", sa.Text(), nullable=False),
    sa.Column("dapp", sa.Text(), nullable=False),
    sa.Column("block", sa.Boolean(), server_default=sa.text("false"), nullable=False),
    sa.PrimaryKeyConstraint("id"),
  )
  guarded_create_index("ix_preference_account_dapp", "Preference", ["account", "dapp"], unique=False)


def downgrade() -> None:
  """Downgrade schema."""
  guarded_drop_index("ix_preference_account_dapp", table_name="Preference")
  guarded_drop_table("Preference")
  guarded_drop_index("ix_notification_receiver_endpoint_sent_at", table_name="Notification")
  guarded_drop_index("ux_notification_id_endpoint", table_name="Notification")
  guarded_drop_table("Notification")
  guarded_drop_index("ix_Subscription_account", table_name="Subscription")
  guarded_drop_table("Subscription")
