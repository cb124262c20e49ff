from __future__ import annotations

from fastapi import FastAPI

from app.api.routes import events
from app.core.exceptions import decode_exception_handler, global_exception_handler
from app.core.lifespan import lifespan
from app.notifications.contracts import DecodeError

app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(DecodeError, decode_exception_handler)


@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
  """Return a simple health status."""
  return {"status": "ok", "version": "0.1.0"}


app.include_router(events.router, tags=["events"])
