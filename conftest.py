"""Shared pytest fixtures for the notifier tests"""

import json
from datetime import datetime, timezone

import httpx
import pytest

from notifier.config import NotifierConfig

API_URL = "https://abc123.execute-api.us-east-1.amazonaws.com/prod/notifications"


@pytest.fixture
def config(tmp_path):
  """Complete configuration with a temporary local template directory"""
  return NotifierConfig(
    api=API_URL,
    app="billing",
    template_bucket="billing-templates",
    region="us-east-1",
    template_dir=tmp_path / "templates",
  )


@pytest.fixture
def fixed_now():
  return datetime(2024, 3, 15, 10, 30, 20, tzinfo=timezone.utc)


@pytest.fixture
def email_data():
  """Raw text e-mail payload as a caller sends it"""
  return {
    "from": "no-reply@example.com",
    "to": "ana@example.com",
    "subject": "Your invoice",
    "body": "Total due: <b>$10</b>",
  }


@pytest.fixture
def sent_requests():
  """Requests captured by the mock API, in order"""
  return []


@pytest.fixture
def mock_client(sent_requests):
  """httpx client whose API answers every POST with the echoed operation"""

  def handler(request: httpx.Request) -> httpx.Response:
    sent_requests.append(request)
    record = json.loads(request.content)
    return httpx.Response(200, json={"ok": True, "operation": record["operation"]})

  return httpx.AsyncClient(transport=httpx.MockTransport(handler))
