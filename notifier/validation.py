"""
Payload validation for e-mail and SMS notifications

Checks run in a fixed order and the first violated rule raises; nothing is
accumulated.
"""

from collections.abc import Mapping
from typing import Any

from notifier.exceptions import FieldTypeError, ValidationError
from notifier.models import EmailPayload, SMSPayload

RECIPIENT_FIELDS = ("to", "cc", "bcc", "replyTo")
STRING_FIELDS = ("from", "subject", "template")


def is_string_list(value: Any) -> bool:
  return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _as_mapping(payload: Any, kind: str) -> Mapping:
  if isinstance(payload, (EmailPayload, SMSPayload)):
    return payload.to_wire()
  if not payload:
    raise ValidationError(f"The `{kind}` object property is required", kind)
  if not isinstance(payload, Mapping):
    raise FieldTypeError(f"Expected `{kind}` to be an object", kind)
  return payload


def validate_email(email: Any) -> EmailPayload:
  """
  Check a raw e-mail payload and return it as an EmailPayload

  Args:
    email: Mapping (wire keys) or an EmailPayload

  Returns:
    EmailPayload with the same values, recipients not yet normalized

  Raises:
    ValidationError: a required field is missing
    FieldTypeError: a field has the wrong type
  """
  email = _as_mapping(email, "email")

  if not (email.get("to") or email.get("cc") or email.get("bcc")):
    raise ValidationError(
      "Email destination is required. Please, send at least one of these "
      "properties: `to`, `cc` or `bcc`",
      "to",
    )
  if not email.get("from"):
    raise ValidationError("Email source is required. Send a `from` value", "from")
  if not email.get("subject"):
    raise ValidationError("Email `subject` is required", "subject")
  if not email.get("body"):
    raise ValidationError("Email `body` is required", "body")

  if email.get("template"):
    if not isinstance(email["body"], Mapping):
      raise FieldTypeError(
        "Expected email param `body` to be an object on template email", "body"
      )
  elif not isinstance(email["body"], str):
    raise FieldTypeError(
      "Expected email param `body` to be a string on text email", "body"
    )

  for field in STRING_FIELDS:
    if email.get(field) and not isinstance(email[field], str):
      raise FieldTypeError(f"Expected email param `{field}` to be a string", field)

  for field in RECIPIENT_FIELDS:
    value = email.get(field)
    if value and not (isinstance(value, str) or is_string_list(value)):
      raise FieldTypeError(
        f"Expected email param `{field}` to be a string or an array of strings",
        field,
      )

  body = email["body"]
  if isinstance(body, Mapping):
    body = dict(body)
  return EmailPayload.model_validate({**email, "body": body})


def validate_sms(sms: Any) -> SMSPayload:
  """Check a raw SMS payload and return it as an SMSPayload"""
  sms = _as_mapping(sms, "sms")

  message = sms.get("message")
  if message is None:
    raise ValidationError("SMS `message` is required", "message")
  if not isinstance(message, str):
    raise FieldTypeError("Expected sms param `message` to be a string", "message")
  if not message.strip():
    raise ValidationError("SMS `message` can not be empty", "message")

  if not (sms.get("to") or sms.get("phone")):
    raise ValidationError(
      "SMS destination is required. Send a `to` or `phone` value", "phone"
    )
  for field in ("to", "phone"):
    if sms.get(field) and not isinstance(sms[field], str):
      raise FieldTypeError(f"Expected sms param `{field}` to be a string", field)

  return SMSPayload.model_validate(sms)
