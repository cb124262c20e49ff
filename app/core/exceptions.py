import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.notifications.contracts import DecodeError

logger = logging.getLogger(__name__)


def _error_payload(detail: Any) -> dict[str, Any]:
  """Build a minimal error payload; push hosts only look at the status code."""
  return {"detail": detail}


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
  """Log unhandled errors and answer 500 so the event gets redelivered."""
  logger.error("Unhandled exception path=%s error_type=%s", request.url.path, type(exc).__name__, exc_info=True)
  return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_payload("Internal Server Error"))


async def decode_exception_handler(request: Request, exc: DecodeError) -> JSONResponse:
  """Reject undecodable events with a non-success status."""
  # Still a nack for Pub/Sub; the 4xx only distinguishes it in request logs.
  logger.error("Event decode failed path=%s error=%s", request.url.path, exc)
  return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_payload(str(exc)))
