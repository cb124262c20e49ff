"""Decoding of inbound notification events."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from app.notifications.contracts import DecodeError


class Notification(BaseModel):
  """A single notification addressed to one receiving account."""

  id: StrictStr = Field(min_length=1)
  block_height: StrictInt = Field(alias="blockHeight")
  initiated_by: StrictStr = Field(alias="initiatedBy")
  item_type: StrictStr = Field(alias="itemType")
  message: StrictStr | None = None
  path: StrictStr
  receiver: StrictStr = Field(min_length=1)
  value_type: StrictStr | None = Field(default=None, alias="valueType")
  model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

  def to_push_body(self) -> str:
    """Serialize with the camelCase wire keys for the service worker."""
    return self.model_dump_json(by_alias=True)


def _message_from_envelope(envelope: Any) -> dict[str, Any]:
  if not isinstance(envelope, dict):
    raise DecodeError("Event envelope must be a JSON object.")

  message = envelope.get("message")
  # Eventarc wraps the Pub/Sub body in a CloudEvent `data` attribute.
  if message is None and isinstance(envelope.get("data"), dict):
    message = envelope["data"].get("message")

  if not isinstance(message, dict):
    raise DecodeError("Event envelope has no 'message' object.")

  return message


def decode_payload(data: str | bytes) -> Notification:
  """Decode the base64 message data into a notification."""
  try:
    raw = base64.b64decode(data, validate=True)
  except (binascii.Error, ValueError) as exc:
    raise DecodeError(f"Message data is not valid base64: {exc}") from exc

  try:
    return Notification.model_validate_json(raw)
  except ValidationError as exc:
    raise DecodeError(f"Notification payload failed validation: {exc.error_count()} error(s): {exc.errors(include_input=False)}") from exc


def decode_event(envelope: Any) -> Notification:
  """Turn a Pub/Sub push body or Eventarc CloudEvent into a notification."""
  message = _message_from_envelope(envelope)
  data = message.get("data")
  if not isinstance(data, str | bytes) or not data:
    raise DecodeError("Event message has no 'data' payload.")

  return decode_payload(data)


def decode_event_bytes(body: bytes) -> Notification:
  """Decode a raw HTTP request body."""
  try:
    envelope = json.loads(body)
  except (UnicodeDecodeError, ValueError) as exc:
    raise DecodeError(f"Event body is not valid JSON: {exc}") from exc

  return decode_event(envelope)
