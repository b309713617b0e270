"""
Payload normalization: recipient lists, E.164 phone numbers and HTML escaping
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

from notifier.exceptions import PhoneFormatError, ValidationError
from notifier.models import EmailPayload, SMSPayload
from notifier.validation import validate_email, validate_sms

logger = logging.getLogger(__name__)

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")
NON_DIGITS = re.compile(r"\D")

# A bare ampersand, i.e. one that doesn't already start a character reference
_BARE_AMPERSAND = re.compile(r"&(?!(?:[A-Za-z][A-Za-z0-9]*|#\d+|#[xX][0-9A-Fa-f]+);)")
_MARKUP_CHARS = {"<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#x27;"}


def escape_html(text: str) -> str:
  """
  Escape markup characters in text

  Existing character references are kept as they are, so escaping an
  already escaped string returns it unchanged.
  """
  text = _BARE_AMPERSAND.sub("&amp;", text)
  return "".join(_MARKUP_CHARS.get(ch, ch) for ch in text)


def _escape_leaves(value: Any) -> Any:
  match value:
    case str():
      return escape_html(value)
    case Mapping():
      return {k: _escape_leaves(v) for k, v in value.items()}
    case list() | tuple():
      return [_escape_leaves(v) for v in value]
    case _:
      return value


def sanitize_email(email: EmailPayload) -> EmailPayload:
  """Turn single recipients into lists and escape the body"""
  updates: dict[str, Any] = {}
  for field in ("to", "cc", "bcc", "reply_to"):
    value = getattr(email, field)
    if isinstance(value, str) and value:
      updates[field] = [value]
  updates["body"] = _escape_leaves(email.body)
  return email.model_copy(update=updates)


def sanitize_phone(raw: str, field: str = "phone") -> str:
  """
  Normalize a phone number to E.164

  Args:
    raw: Phone number in any punctuation, e.g. "55 (48) 99875-4321"
    field: Payload field the number came from, reported on failure

  Returns:
    "+" followed by the digits of raw

  Raises:
    PhoneFormatError: the digits don't form a valid E.164 number
  """
  phone = "+" + NON_DIGITS.sub("", str(raw))
  if not E164_PATTERN.match(phone):
    raise PhoneFormatError(field, raw)
  return phone


def sanitize_sms(sms: SMSPayload) -> SMSPayload:
  """Trim the message and resolve the recipient into `phone`"""
  phone = None
  if sms.to:
    phone = sanitize_phone(sms.to, "to")
  if sms.phone:
    phone = sanitize_phone(sms.phone, "phone")
  return sms.model_copy(
    update={"message": sms.message.strip(), "to": None, "phone": phone}
  )


def validate_and_sanitize_data(data: Mapping[str, Any]) -> dict[str, Any]:
  """
  Validate and sanitize the `email` and/or `sms` entries of a request

  Returns:
    A new dict with those entries replaced by sanitized payloads, every other
    key unchanged

  Raises:
    ValidationError: neither `email` nor `sms` is present
  """
  if not data.get("email") and not data.get("sms"):
    raise ValidationError(
      "A notification option is required. Send an `email` or `sms` object", "email"
    )

  sanitized = dict(data)
  if data.get("email"):
    sanitized["email"] = sanitize_email(validate_email(data["email"]))
    logger.debug("Email payload validated and sanitized")
  if data.get("sms"):
    sanitized["sms"] = sanitize_sms(validate_sms(data["sms"]))
    logger.debug("SMS payload validated and sanitized")
  return sanitized
