from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.notifications.contracts import DeliveryStatus, DispatchReport, DropReason


class DeliveryResultResponse(BaseModel):
  """Outcome for one endpoint."""

  endpoint: str
  status: DeliveryStatus
  status_code: int | None = Field(default=None, serialization_alias="statusCode")


class DispatchReportResponse(BaseModel):
  """Response body returned to the event host."""

  notification_id: str = Field(serialization_alias="notificationId")
  drop_reason: DropReason | None = Field(default=None, serialization_alias="dropReason")
  results: list[DeliveryResultResponse]
  model_config = ConfigDict(frozen=True)

  @classmethod
  def from_report(cls, report: DispatchReport) -> DispatchReportResponse:
    results = [DeliveryResultResponse(endpoint=result.endpoint, status=result.status, status_code=result.status_code) for result in report.results]
    return cls(notification_id=report.notification_id, drop_reason=report.drop_reason, results=results)
