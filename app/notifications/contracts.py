"""Contracts for push notification dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Protocol


class FailureKind(str, Enum):
  """Closed classification of push transport failures."""

  INVALID = "invalid"
  GONE = "gone"
  TRANSIENT = "transient"

  @property
  def is_permanent(self) -> bool:
    return self in {FailureKind.INVALID, FailureKind.GONE}


def classify_status(status_code: int | None) -> FailureKind:
  """Map a push service status code to a failure kind."""
  if status_code == HTTPStatus.BAD_REQUEST:
    return FailureKind.INVALID

  if status_code == HTTPStatus.GONE:
    return FailureKind.GONE

  return FailureKind.TRANSIENT


class DeliveryStatus(str, Enum):
  """Terminal state of one subscription within one dispatch."""

  SENT = "sent"
  SKIPPED_DUPLICATE = "skipped_duplicate"
  SKIPPED_RATE_LIMITED = "skipped_rate_limited"
  FAILED_INVALIDATED = "failed_invalidated"
  FAILED_TRANSIENT = "failed_transient"


class DropReason(str, Enum):
  """Why a notification was dropped before reaching any endpoint."""

  DISALLOWED_TYPE = "disallowed_type"
  NO_SUBSCRIPTIONS = "no_subscriptions"
  BLOCKED_BY_PREFERENCE = "blocked_by_preference"


@dataclass(frozen=True)
class DeliveryResult:
  """Outcome for a single endpoint."""

  endpoint: str
  status: DeliveryStatus
  status_code: int | None = None


@dataclass(frozen=True)
class DispatchReport:
  """Summary of one dispatch invocation."""

  notification_id: str
  drop_reason: DropReason | None = None
  results: tuple[DeliveryResult, ...] = field(default_factory=tuple)

  def count(self, status: DeliveryStatus) -> int:
    return sum(1 for result in self.results if result.status is status)


class NotificationError(Exception):
  """Base class for all notification dispatch failures."""


class DecodeError(NotificationError):
  """Raised when an inbound event cannot be decoded into a notification."""


class NotificationProviderError(NotificationError):
  """Exception raised when the push provider rejects a delivery."""


class PushDeliveryError(NotificationProviderError):
  """A failed push delivery along with its classified failure kind."""

  def __init__(self, message: str, *, status_code: int | None) -> None:
    super().__init__(message)
    self.status_code = status_code
    self.kind = classify_status(status_code)


class PushSender(Protocol):
  """Delivery contract for sending push notifications."""

  def send(self, subscription_object: str, body: str) -> None:
    """Send a push payload synchronously, raising PushDeliveryError on failure."""
