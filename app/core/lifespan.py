import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import get_settings
from app.core.database import dispose_engine
from app.core.logging import _initialize_logging
from app.notifications.factory import build_notification_dispatcher


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Load configuration, wire the dispatcher, and release the pool on shutdown."""
  # Missing VAPID or database settings raise here and abort startup.
  settings = get_settings()
  _initialize_logging(settings)
  logger = logging.getLogger("app.core.lifespan")

  app.state.dispatcher = build_notification_dispatcher(settings)
  logger.info("Startup complete - allowed_value_types=%s max_notifications_per_day=%s", list(settings.allowed_value_types) or "all", settings.max_notifications_per_day)

  try:
    yield
  finally:
    await dispose_engine()
    logger.info("Database pool disposed.")
