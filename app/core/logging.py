"""Process-wide logging setup."""

from __future__ import annotations

import logging
import sys

from app.config import Settings

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_initialized = False


def _initialize_logging(settings: Settings) -> None:
  """Attach a single stdout handler to the root logger."""
  global _initialized
  root = logging.getLogger()
  root.setLevel(settings.log_level)
  if _initialized:
    return

  handler = logging.StreamHandler(sys.stdout)
  handler.setFormatter(logging.Formatter(_LOG_FORMAT))
  root.addHandler(handler)

  # Uvicorn installs its own handlers; let records bubble to root instead.
  for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    uvicorn_logger = logging.getLogger(name)
    uvicorn_logger.handlers.clear()
    uvicorn_logger.propagate = True

  _initialized = True
