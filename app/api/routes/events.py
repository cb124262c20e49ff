"""Inbound notification events delivered by Pub/Sub push or Eventarc."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status

from app.api.models import DispatchReportResponse
from app.notifications.dispatcher import NotificationDispatcher
from app.notifications.events import decode_event_bytes

router = APIRouter()
logger = logging.getLogger(__name__)


def get_dispatcher(request: Request) -> NotificationDispatcher:
  return request.app.state.dispatcher


@router.post("/", status_code=status.HTTP_200_OK, response_model=DispatchReportResponse)
async def receive_notification(request: Request, dispatcher: NotificationDispatcher = Depends(get_dispatcher)) -> DispatchReportResponse:  # noqa: B008
  """Handle one event. Any raised error yields a non-2xx so the host redelivers."""
  notification = decode_event_bytes(await request.body())
  logger.debug("Received notification id=%s receiver=%s value_type=%s", notification.id, notification.receiver, notification.value_type)
  report = await dispatcher.dispatch(notification)
  return DispatchReportResponse.from_report(report)
