"""Test configuration shared across the suite."""

from __future__ import annotations

import os

# Structurally valid P-256 keys, never used against a real push service.
TEST_VAPID_PUBLIC_KEY = "BAEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQE"
TEST_VAPID_PRIVATE_KEY = "AQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQEBAQE"

# Settings are read at import time by some modules, so seed the environment first.
os.environ.setdefault("VAPID_SUBJECT", "mailto:test@example.com")
os.environ.setdefault("VAPID_PUBLIC_KEY", TEST_VAPID_PUBLIC_KEY)
os.environ.setdefault("VAPID_PRIVATE_KEY", TEST_VAPID_PRIVATE_KEY)
os.environ.setdefault("DB_USER", "postgres")
os.environ.setdefault("DB_PASS", "postgres")
os.environ.setdefault("DB_NAME", "notifications_test")
os.environ.setdefault("INSTANCE_HOST", "127.0.0.1")
os.environ.setdefault("DB_PORT", "5432")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402

from app.config import DatabaseSettings, Settings  # noqa: E402


def build_settings(**overrides) -> Settings:
  database = DatabaseSettings(debug=False, user="postgres", password="postgres", name="notifications_test", host="127.0.0.1", port=5432, pool_size=5, acquire_timeout_seconds=60, connect_timeout_seconds=30, idle_timeout_seconds=600)
  values = {
    "debug": False,
    "log_level": "INFO",
    "allowed_value_types": (),
    "max_notifications_per_day": 15,
    "vapid_subject": "mailto:test@example.com",
    "vapid_public_key": TEST_VAPID_PUBLIC_KEY,
    "vapid_private_key": TEST_VAPID_PRIVATE_KEY,
    "push_timeout_seconds": 10.0,
    "push_ttl_seconds": 2419200,
    "database": database,
  }
  values.update(overrides)
  return Settings(**values)


@pytest.fixture
def settings() -> Settings:
  return build_settings()


@pytest.fixture
def mock_db_session():
  session = AsyncMock()
  # Mock execute result
  result = MagicMock()
  result.scalar_one_or_none.return_value = None
  result.scalar_one.return_value = 0
  session.execute.return_value = result
  return session


@pytest.fixture
def settings_factory():
  return build_settings
