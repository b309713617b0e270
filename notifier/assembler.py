"""
Outbound record assembly and dispatch

create/update: validate and sanitize the payload, check the e-mail template
renders, inject app settings, build the schedule, then send.
remove: only needs the notification id.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

from interfaces.base import Transport
from interfaces.http import HttpTransport, make_request
from notifier.config import (
  PUT_REQUIRED,
  REMOVE_REQUIRED,
  SEND_REQUIRED,
  NotifierConfig,
)
from notifier.exceptions import IdRequiredError, SizeLimitError
from notifier.models import Operation, OutboundRecord
from notifier.sanitize import validate_and_sanitize_data
from notifier.schedule import build_schedule
from notifier.templates import TemplateRenderer, create_template_renderer

logger = logging.getLogger(__name__)

# The notification API rejects bodies above this many bytes
MAX_RECORD_BYTES = 256_000


def serialize_record(record: OutboundRecord) -> bytes:
  """Compact UTF-8 JSON of the record's wire representation"""
  return json.dumps(
    record.to_wire(), separators=(",", ":"), ensure_ascii=False
  ).encode("utf-8")


def check_size(payload: bytes, limit: int = MAX_RECORD_BYTES) -> None:
  if len(payload) > limit:
    raise SizeLimitError(len(payload), limit)


async def assemble_put(
  operation: Operation,
  data: Mapping[str, Any],
  config: NotifierConfig,
  renderer: Optional[TemplateRenderer] = None,
) -> OutboundRecord:
  """
  Build the record for a create or update request

  Args:
    operation: Operation.CREATE or Operation.UPDATE
    data: Request with `email` and/or `sms`, optional `id` and `schedule`
    config: Notifier configuration; api, app and template_bucket must be set
    renderer: Template renderer used when the e-mail names a template; when
      omitted one is built from the configuration and closed after rendering

  Returns:
    The complete, validated outbound record

  Raises:
    ConfigError, IdRequiredError, ValidationError, FieldTypeError,
    PhoneFormatError, TemplateError, ScheduleConflictError, ScheduleFormatError,
    SizeLimitError
  """
  config.require(*PUT_REQUIRED)

  if operation == Operation.UPDATE and not data.get("id"):
    raise IdRequiredError("Update method parameters must have an id")

  sanitized = validate_and_sanitize_data(data)

  # Render now so a broken template fails here and not when the e-mail is sent
  email = sanitized.get("email")
  if email is not None and email.template:
    if renderer is not None:
      await renderer.render(config.template_bucket, email.template, email.body)
    else:
      renderer = create_template_renderer(config)
      try:
        await renderer.render(config.template_bucket, email.template, email.body)
      finally:
        await renderer.aclose()

  schedule = build_schedule(sanitized.get("schedule") or {}, config.delay)

  # app settings always come from the configuration
  sanitized.pop("templateBucket", None)
  record = OutboundRecord.model_validate(
    {
      **sanitized,
      "operation": operation,
      "app": config.app,
      "template_bucket": config.template_bucket,
      "schedule": schedule,
    }
  )
  check_size(serialize_record(record))
  return record


def assemble_remove(
  data: str | Mapping[str, Any], config: NotifierConfig
) -> OutboundRecord:
  """Build the record for a remove request from an id or a mapping with one

  Raises:
    ConfigError, IdRequiredError, SizeLimitError
  """
  config.require(*REMOVE_REQUIRED)

  if isinstance(data, str):
    data = {"id": data}
  if not data.get("id"):
    raise IdRequiredError("Remove method parameters must have an id.")

  record = OutboundRecord.model_validate({**data, "operation": Operation.REMOVE})
  check_size(serialize_record(record))
  return record


class Notifier:
  """
  Client for the notification API.

  Holds an immutable configuration plus the transport and template renderer.
  Use as an async context manager, or call aclose(), to release the HTTP
  client it creates.
  """

  def __init__(
    self,
    config: Optional[NotifierConfig] = None,
    transport: Optional[Transport] = None,
    renderer: Optional[TemplateRenderer] = None,
  ):
    self.config = config or NotifierConfig()
    self.transport = transport or HttpTransport()
    self.renderer = renderer

  async def __aenter__(self) -> "Notifier":
    return self

  async def __aexit__(self, *exc_info) -> None:
    await self.aclose()

  async def aclose(self) -> None:
    await self.transport.aclose()

  def configure(self, **overrides: Any) -> "Notifier":
    """New notifier sharing this one's transport, with merged configuration"""
    return Notifier(self.config.configure(**overrides), self.transport, self.renderer)

  async def create(self, data: Mapping[str, Any]) -> Any:
    """Create a new notification"""
    record = await assemble_put(Operation.CREATE, data, self.config, self.renderer)
    return await self.send(record)

  async def update(self, data: Mapping[str, Any]) -> Any:
    """Update an existing notification, `data` must carry its id"""
    record = await assemble_put(Operation.UPDATE, data, self.config, self.renderer)
    return await self.send(record)

  async def remove(self, data: str | Mapping[str, Any]) -> Any:
    """Remove an existing notification by id"""
    record = assemble_remove(data, self.config)
    return await self.send(record)

  async def send(self, record: OutboundRecord) -> Any:
    """
    Serialize, size-check and post a record

    Returns:
      Parsed JSON response of the notification API

    Raises:
      SizeLimitError: the serialized record is too big
      TransportError: the API call failed
    """
    self.config.require(*SEND_REQUIRED)
    payload = serialize_record(record)
    check_size(payload)

    request = make_request(self.config.api, payload, self.config.region)
    logger.info(
      f"Sending {record.operation.value} notification ({len(payload)} bytes) to {request.host}"
    )
    return await self.transport.send(request)
