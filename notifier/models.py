"""Data models for notification payloads, schedules and outbound records"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Operation(str, Enum):
  CREATE = "CREATE"
  UPDATE = "UPDATE"
  REMOVE = "REMOVE"


class _Record(BaseModel):
  """Frozen model accepting both field names and camelCase wire names"""

  model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

  def to_wire(self) -> dict[str, Any]:
    """Wire representation: camelCase keys, unset fields left out"""
    return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EmailPayload(_Record):
  """E-mail notification. Recipient fields become lists once sanitized."""

  from_: str = Field(alias="from")
  to: Optional[str | list[str]] = None
  cc: Optional[str | list[str]] = None
  bcc: Optional[str | list[str]] = None
  reply_to: Optional[str | list[str]] = Field(default=None, alias="replyTo")
  subject: str
  body: str | dict[str, Any]
  template: Optional[str] = None


class SMSPayload(_Record):
  """SMS notification. After sanitizing only `phone` names the recipient."""

  message: str
  to: Optional[str] = None
  phone: Optional[str] = None


# Fields whose presence turns a schedule into an explicit cron schedule
TEMPORAL_FIELDS = ("minute", "hour", "day", "month", "week_day", "year")


class ScheduleSpec(_Record):
  """Schedule description as supplied by the caller. Values are cron tokens."""

  minute: Optional[str] = None
  hour: Optional[str] = None
  day: Optional[str] = None
  month: Optional[str] = None
  week_day: Optional[str] = Field(default=None, alias="weekDay")
  year: Optional[str] = None
  working_days: Optional[bool] = Field(default=None, alias="workingDays")
  end: Optional[str | int] = None

  @field_validator(*TEMPORAL_FIELDS, mode="before")
  @classmethod
  def token_to_str(cls, v: Any) -> Any:
    """Cron tokens are opaque text; numbers are accepted for convenience"""
    if isinstance(v, bool):
      return v
    if isinstance(v, int):
      return str(v)
    if v == "":
      return None
    return v

  @field_validator("end", mode="before")
  @classmethod
  def blank_end(cls, v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
      return None
    return v

  def is_set(self, field: str) -> bool:
    return getattr(self, field) is not None


class Schedule(ScheduleSpec):
  """Built schedule: the caller's fields plus the cron expression"""

  end: Optional[int] = None
  expression: str
  once: bool = False


class OutboundRecord(_Record):
  """Record posted to the notification API"""

  operation: Operation
  id: Optional[str] = None
  email: Optional[EmailPayload] = None
  sms: Optional[SMSPayload] = None
  schedule: Optional[Schedule] = None
  app: Optional[str] = None
  template_bucket: Optional[str] = Field(default=None, alias="templateBucket")

  @field_validator("id", mode="before")
  @classmethod
  def id_to_str(cls, v: Any) -> Any:
    if isinstance(v, int) and not isinstance(v, bool):
      return str(v)
    return v
