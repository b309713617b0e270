"""Notifier client: schedule expressions, payload validation and request assembly

The HTTP-facing pieces live in notifier.assembler (Notifier) and
notifier.templates; import them from there.
"""

from .config import NotifierConfig
from .exceptions import (
  ConfigError,
  FieldTypeError,
  IdRequiredError,
  NotifierError,
  PhoneFormatError,
  ScheduleConflictError,
  ScheduleFormatError,
  SizeLimitError,
  TemplateError,
  TransportError,
  ValidationError,
)
from .models import (
  EmailPayload,
  Operation,
  OutboundRecord,
  Schedule,
  ScheduleSpec,
  SMSPayload,
)
from .sanitize import (
  sanitize_email,
  sanitize_phone,
  sanitize_sms,
  validate_and_sanitize_data,
)
from .schedule import build_schedule
from .validation import validate_email, validate_sms

__all__ = [
  "ConfigError",
  "EmailPayload",
  "FieldTypeError",
  "IdRequiredError",
  "NotifierConfig",
  "NotifierError",
  "Operation",
  "OutboundRecord",
  "PhoneFormatError",
  "SMSPayload",
  "Schedule",
  "ScheduleConflictError",
  "ScheduleFormatError",
  "ScheduleSpec",
  "SizeLimitError",
  "TemplateError",
  "TransportError",
  "ValidationError",
  "build_schedule",
  "sanitize_email",
  "sanitize_phone",
  "sanitize_sms",
  "validate_and_sanitize_data",
  "validate_email",
  "validate_sms",
]
