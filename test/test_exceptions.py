"""
Test the notifier error model
Run with: uv run pytest test/test_exceptions.py
"""

import pytest

from notifier.exceptions import (
  ConfigError,
  ErrorResponse,
  IdRequiredError,
  NotifierError,
  PhoneFormatError,
  ScheduleConflictError,
  SizeLimitError,
  TemplateError,
  TransportError,
)


@pytest.mark.parametrize(
  "error, name, source",
  [
    (ConfigError(["api"]), "CONFIG_MISSING", "config"),
    (PhoneFormatError("to", "0"), "PHONE_FORMAT", "sanitize"),
    (ScheduleConflictError("conflict"), "SCHEDULE_CONFLICT", "schedule"),
    (SizeLimitError(300_000, 256_000), "SIZE_LIMIT_EXCEEDED", "request"),
    (IdRequiredError("no id"), "ID_REQUIRED", "request"),
  ],
)
def test_names_and_sources(error, name, source):
  assert isinstance(error, NotifierError)
  assert error.name == name
  assert error.source == source


def test_to_response():
  response = IdRequiredError("Remove method parameters must have an id.").to_response()
  assert isinstance(response, ErrorResponse)
  assert response.name == "ID_REQUIRED"
  assert response.description == "Remove method parameters must have an id."
  assert response.caused_by is None


def test_from_exception_keeps_cause():
  error = TransportError.from_exception(
    ConnectionError("refused"), context="Failed to reach notification API"
  )
  assert error.description == "Failed to reach notification API: refused"
  assert error.caused_by == "ConnectionError: refused"
  assert error.name == "TRANSPORT_ERROR"


def test_from_exception_custom_name():
  error = TemplateError.from_exception(KeyError("x"), name="TEMPLATE_MISSING")
  assert error.name == "TEMPLATE_MISSING"
  assert error.source == "template"
