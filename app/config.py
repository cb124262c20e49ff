"""Application configuration loaded from environment variables."""

from __future__ import annotations

import base64
import binascii
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv
from py_vapid import Vapid

load_dotenv(override=False)

DEFAULT_MAX_NOTIFICATIONS_PER_DAY = 15
DEFAULT_PUSH_TTL_SECONDS = 4 * 7 * 24 * 60 * 60


@dataclass(frozen=True)
class DatabaseSettings:
  """Typed settings for database connectivity and pool sizing."""

  debug: bool
  user: str
  password: str
  name: str
  host: str
  port: int
  pool_size: int
  acquire_timeout_seconds: int
  connect_timeout_seconds: int
  idle_timeout_seconds: int


@dataclass(frozen=True)
class Settings:
  """Typed settings for the push dispatcher."""

  debug: bool
  log_level: str
  allowed_value_types: tuple[str, ...]
  max_notifications_per_day: int
  vapid_subject: str
  vapid_public_key: str
  vapid_private_key: str
  push_timeout_seconds: float
  push_ttl_seconds: int
  database: DatabaseSettings


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _parse_value_types(raw: str | None) -> tuple[str, ...]:
  # An empty list means every value type is allowed.
  if not raw:
    return ()

  return tuple(value.strip() for value in raw.split(",") if value.strip())


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value


def _require(name: str) -> str:
  value = _optional_str(os.getenv(name))
  if value is None:
    raise ValueError(f"{name} must be set in the environment. Check the '.env.example' file.")
  return value


def _positive_int(name: str, default: str) -> int:
  value = int(os.getenv(name, default))
  if value <= 0:
    raise ValueError(f"{name} must be a positive integer.")
  return value


def _vapid_public_key(name: str) -> str:
  value = _require(name)
  try:
    raw = base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
  except (binascii.Error, ValueError) as exc:
    raise ValueError(f"{name} must be base64url encoded: {exc}") from exc
  # Uncompressed P-256 point.
  if len(raw) != 65 or raw[0] != 0x04:
    raise ValueError(f"{name} must decode to a 65 byte uncompressed P-256 public key.")
  return value


def _vapid_private_key(name: str) -> str:
  value = _require(name)
  try:
    if os.path.isfile(value):
      Vapid.from_file(private_key_file=value)
    else:
      Vapid.from_string(private_key=value)
  except (ValueError, TypeError) as exc:
    raise ValueError(f"{name} is not a usable VAPID private key: {exc}") from exc
  return value


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
  """Load database settings without requiring push credentials."""
  # Kept separate so migrations do not need VAPID keys.
  return DatabaseSettings(
    debug=_parse_bool(os.getenv("DEBUG")),
    user=_require("DB_USER"),
    password=_require("DB_PASS"),
    name=_require("DB_NAME"),
    host=_require("INSTANCE_HOST"),
    port=int(_require("DB_PORT")),
    pool_size=_positive_int("DB_POOL_SIZE", "5"),
    acquire_timeout_seconds=_positive_int("DB_ACQUIRE_TIMEOUT_SECONDS", "60"),
    connect_timeout_seconds=_positive_int("DB_CONNECT_TIMEOUT_SECONDS", "30"),
    idle_timeout_seconds=_positive_int("DB_IDLE_TIMEOUT_SECONDS", "600"),
  )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  vapid_subject = _require("VAPID_SUBJECT")
  if not (vapid_subject.startswith("mailto:") or vapid_subject.startswith("https://")):
    raise ValueError("VAPID_SUBJECT must start with 'mailto:' or 'https://'.")

  vapid_public_key = _vapid_public_key("VAPID_PUBLIC_KEY")
  vapid_private_key = _vapid_private_key("VAPID_PRIVATE_KEY")

  max_notifications_per_day = int(os.getenv("MAX_NOTIFICATIONS_PER_DAY") or DEFAULT_MAX_NOTIFICATIONS_PER_DAY)
  if max_notifications_per_day < 0:
    raise ValueError("MAX_NOTIFICATIONS_PER_DAY must be zero or a positive integer.")

  push_timeout_seconds = float(os.getenv("PUSH_TIMEOUT_SECONDS", "10"))
  if push_timeout_seconds <= 0:
    raise ValueError("PUSH_TIMEOUT_SECONDS must be positive.")

  push_ttl_seconds = int(os.getenv("PUSH_TTL_SECONDS", str(DEFAULT_PUSH_TTL_SECONDS)))
  if push_ttl_seconds < 0:
    raise ValueError("PUSH_TTL_SECONDS must be zero or a positive integer.")

  return Settings(
    debug=_parse_bool(os.getenv("DEBUG")),
    log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    allowed_value_types=_parse_value_types(os.getenv("ALLOWED_VALUE_TYPES")),
    max_notifications_per_day=max_notifications_per_day,
    vapid_subject=vapid_subject,
    vapid_public_key=vapid_public_key,
    vapid_private_key=vapid_private_key,
    push_timeout_seconds=push_timeout_seconds,
    push_ttl_seconds=push_ttl_seconds,
    database=get_database_settings(),
  )
