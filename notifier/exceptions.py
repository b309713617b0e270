"""
Custom exceptions for the notifier client
"""

from typing import Literal, Optional, cast
from pydantic import BaseModel, Field


# All possible error sources in the notifier
ErrorSource = Literal[
  "config",  # Missing or invalid client configuration
  "validation",  # Payload validation errors
  "sanitize",  # Payload normalization errors
  "schedule",  # Schedule expression building
  "template",  # Template fetch/render
  "request",  # Outbound record assembly
  "transport",  # HTTP transport errors
]


class ErrorResponse(BaseModel):
  """Standardized error response model"""

  description: str = Field(..., description="Human-readable error message")
  name: str = Field(..., description="Unique error identifier")
  source: ErrorSource = Field(..., description="Where the error originated")
  caused_by: Optional[str] = Field(
    None, description="Original error details if this is a chained error"
  )


class NotifierError(Exception):
  """
  Base class for every error raised by the notifier.
  Subclasses pin the error name and source, callers only pass a description.
  """

  default_name: str = "NOTIFIER_ERROR"
  default_source: ErrorSource = "request"

  def __init__(
    self,
    description: str,
    name: Optional[str] = None,
    source: Optional[ErrorSource] = None,
    caused_by: Optional[str] = None,
  ):
    """
    Initialize a notifier error

    Args:
        description: Human-readable error message
        name: Unique error identifier (e.g., "SIZE_LIMIT_EXCEEDED")
        source: Where the error originated from
        caused_by: Original error details if this wraps another error
    """
    self.description: str = description
    self.name: str = name or self.default_name
    self.source: ErrorSource = source or self.default_source
    self.caused_by: Optional[str] = caused_by
    super().__init__(description)

  def to_response(self) -> ErrorResponse:
    """Convert to ErrorResponse model"""
    return ErrorResponse(
      description=self.description,
      name=self.name,
      source=cast(ErrorSource, self.source),
      caused_by=self.caused_by,
    )

  @classmethod
  def from_exception(
    cls,
    e: Exception,
    context: Optional[str] = None,
    name: Optional[str] = None,
  ) -> "NotifierError":
    """
    Create an error of this class from an existing exception

    Args:
        e: The original exception
        context: Additional context to prepend to the description
        name: Error identifier, defaults to the class name

    Returns:
        Error with original exception details preserved
    """
    original_msg = str(e)
    description = f"{context}: {original_msg}" if context else original_msg

    return cls(
      description=description,
      name=name,
      caused_by=f"{e.__class__.__name__}: {original_msg}",
    )


class ConfigError(NotifierError, ValueError):
  """One or more required configuration keys are not set"""

  default_name = "CONFIG_MISSING"
  default_source = "config"

  def __init__(self, missing: list[str]):
    self.missing = list(missing)
    keys = ", ".join(f"`{key}`" for key in self.missing)
    super().__init__(f"The {keys} configuration must be set on the notifier")


class ValidationError(NotifierError, ValueError):
  """A required payload field is missing or empty"""

  default_name = "VALIDATION_ERROR"
  default_source = "validation"

  def __init__(self, description: str, field: Optional[str] = None):
    self.field = field
    super().__init__(description)


class FieldTypeError(NotifierError, TypeError):
  """A payload field holds a value of the wrong type"""

  default_name = "FIELD_TYPE_ERROR"
  default_source = "validation"

  def __init__(self, description: str, field: Optional[str] = None):
    self.field = field
    super().__init__(description)


class PhoneFormatError(NotifierError, ValueError):
  """An SMS recipient can't be normalized to E.164"""

  default_name = "PHONE_FORMAT"
  default_source = "sanitize"

  def __init__(self, field: str, value: str):
    self.field = field
    self.value = value
    super().__init__(
      f"SMS `{field}` value {value!r} is not a valid phone number. "
      "Use the international format with country code (e.g. +5548999999999)"
    )


class ScheduleConflictError(NotifierError, ValueError):
  default_name = "SCHEDULE_CONFLICT"
  default_source = "schedule"


class ScheduleFormatError(NotifierError, ValueError):
  default_name = "SCHEDULE_FORMAT"
  default_source = "schedule"


class SizeLimitError(NotifierError, ValueError):
  """The serialized record is bigger than the remote API accepts"""

  default_name = "SIZE_LIMIT_EXCEEDED"
  default_source = "request"

  def __init__(self, size: int, limit: int):
    self.size = size
    self.limit = limit
    super().__init__(
      f"The size of your data object is more than {limit // 1000}kb "
      f"(is {size / 1000}kb), unfortunately we can not create notifications of this size"
    )


class IdRequiredError(NotifierError, ValueError):
  default_name = "ID_REQUIRED"
  default_source = "request"


class TemplateError(NotifierError):
  default_name = "TEMPLATE_ERROR"
  default_source = "template"


class TransportError(NotifierError):
  default_name = "TRANSPORT_ERROR"
  default_source = "transport"
