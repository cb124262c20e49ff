from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest
from app.schema.notifications import SentNotification

MIGRATION = Path(__file__).resolve().parents[2] / "alembic" / "versions" / "5e2b7c91d4a0_adopt_dispatch_tables.py"


@pytest.fixture
def migration():
  spec = importlib.util.spec_from_file_location("adopt_dispatch_tables", MIGRATION)
  module = importlib.util.module_from_spec(spec)
  spec.loader.exec_module(module)
  return module


@pytest.fixture
def recorded(monkeypatch, migration):
  calls = []
  for name in ("guarded_create_table", "guarded_create_index", "guarded_drop_index", "guarded_drop_table"):
    monkeypatch.setattr(migration, name, lambda *args, _name=name, **kwargs: calls.append((_name, args, kwargs)))
  return calls


def test_upgrade_adds_unique_index_for_sent_log_conflict_target(migration, recorded):
  migration.upgrade()

  assert ("guarded_create_index", ("ux_notification_id_endpoint", "Notification", ["id", "endpoint"]), {"unique": True}) in recorded
  created = [args[0] for name, args, _ in recorded if name == "guarded_create_table"]
  # The index is guarded on the table, so it must follow the table creation.
  index_position = next(i for i, (name, args, _) in enumerate(recorded) if name == "guarded_create_index" and args[0] == "ux_notification_id_endpoint")
  table_position = next(i for i, (name, args, _) in enumerate(recorded) if name == "guarded_create_table" and args[0] == "Notification")
  assert created == ["Subscription", "Notification", "Preference"]
  assert table_position < index_position


def test_downgrade_drops_unique_index_before_table(migration, recorded):
  migration.downgrade()

  names = [(name, args[0]) for name, args, _ in recorded]
  assert names.index(("guarded_drop_index", "ux_notification_id_endpoint")) < names.index(("guarded_drop_table", "Notification"))


def test_sent_notification_model_declares_unique_id_endpoint_index():
  unique = {tuple(column.name for column in index.columns) for index in SentNotification.__table__.indexes if index.unique}

  assert ("id", "endpoint") in unique
