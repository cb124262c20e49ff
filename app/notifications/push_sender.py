"""Push notification delivery implementations."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass

import requests
from py_vapid import Vapid
from pywebpush import WebPushException, webpush

from app.notifications.contracts import PushDeliveryError, PushSender

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VapidConfig:
  """Configuration required to sign Web Push requests."""

  public_key: str
  private_key: str
  sub: str


def load_vapid_key(private_key: str) -> Vapid:
  """Parse a VAPID private key given as a PEM file path, raw base64url or DER."""
  if os.path.isfile(private_key):
    return Vapid.from_file(private_key_file=private_key)
  return Vapid.from_string(private_key=private_key)


class WebPushSender(PushSender):
  """`pywebpush` backed sender that reports failures with their status code."""

  def __init__(self, *, vapid_config: VapidConfig, timeout_seconds: float = 10.0, ttl_seconds: int = 0) -> None:
    self._vapid_config = vapid_config
    # Parsed once so a bad key fails at startup rather than on every send.
    self._vapid_key = load_vapid_key(vapid_config.private_key)
    self._timeout_seconds = timeout_seconds
    self._ttl_seconds = ttl_seconds

  def send(self, subscription_object: str, body: str) -> None:
    """Send one payload to one subscription. No retries."""
    try:
      subscription_info = json.loads(subscription_object)
    except (TypeError, ValueError) as exc:
      raise PushDeliveryError(f"Stored push subscription is not valid JSON: {exc}", status_code=None) from exc

    if not isinstance(subscription_info, dict):
      raise PushDeliveryError("Stored push subscription must be a JSON object", status_code=None)

    try:
      # Claims are rebuilt per call because pywebpush fills in aud/exp in place.
      webpush(
        subscription_info=subscription_info,
        data=body,
        vapid_private_key=self._vapid_key,
        vapid_claims={"sub": self._vapid_config.sub},
        timeout=self._timeout_seconds,
        ttl=self._ttl_seconds,
      )
    except WebPushException as exc:
      status_code = _extract_status_code(exc)
      raise PushDeliveryError(f"Push delivery failed (status={status_code if status_code is not None else 'unknown'})", status_code=status_code) from exc
    except requests.RequestException as exc:
      raise PushDeliveryError(f"Push service unreachable: {exc}", status_code=None) from exc
    except (ValueError, TypeError, KeyError, AttributeError) as exc:
      # Missing or malformed endpoint/keys surface while encrypting the payload.
      raise PushDeliveryError(f"Push subscription could not be encoded: {exc!r}", status_code=None) from exc


def _extract_status_code(exc: WebPushException) -> int | None:
  """Extract an HTTP status code from a pywebpush exception when available."""
  response = getattr(exc, "response", None)
  if response is None:
    return None

  status = getattr(response, "status_code", None)
  if isinstance(status, int):
    return status

  return None
