"""
Test the notifier command line entrypoint
Run with: uv run pytest test/test_cli.py
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from entrypoints.notifier_cli import load_payload, main

API_URL = "https://api.example.com/prod/notifications"


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
  monkeypatch.setenv("NOTIFIER_API_URL", API_URL)
  monkeypatch.setenv("NOTIFIER_APP_NAME", "billing")
  monkeypatch.setenv("NOTIFIER_TEMPLATE_BUCKET", "billing-templates")
  monkeypatch.setenv("NOTIFIER_TEMPLATE_DIR", str(tmp_path / "templates"))
  monkeypatch.delenv("NOTIFIER_DELAY", raising=False)
  monkeypatch.delenv("NOTIFIER_TEMPLATE_URL", raising=False)
  return tmp_path


@pytest.fixture
def payload_file(cli_env):
  path = cli_env / "payload.yaml"
  path.write_text(
    """
email:
  from: no-reply@example.com
  to: ana@example.com
  subject: Your invoice
  body: "Total: 10"
schedule:
  day: "16"
  hour: "22"
"""
  )
  return path


def run_cli(capsys, *argv):
  status = main(["--env-file", "/nonexistent/.env", *argv])
  return status, capsys.readouterr().out


class TestScheduleCommand:
  def test_explicit(self, cli_env, capsys):
    status, out = run_cli(capsys, "schedule", "--day", "16", "--hour", "22")
    assert status == 0
    assert json.loads(out)["expression"] == "cron(0 22 16 * ? *)"

  def test_working_days(self, cli_env, capsys):
    status, out = run_cli(capsys, "schedule", "--working-days", "--minute", "5")
    assert json.loads(out)["expression"] == "cron(5 11 ? * MON-FRI *)"

  def test_once(self, cli_env, capsys):
    status, out = run_cli(capsys, "schedule", "--delay", "600")
    assert status == 0
    assert json.loads(out)["once"] is True

  def test_conflict_exit_status(self, cli_env, capsys):
    status, out = run_cli(capsys, "schedule", "--day", "1", "--week-day", "MON")
    assert status == 1
    assert out == ""


class TestDryRun:
  def test_create(self, payload_file, capsys):
    status, out = run_cli(capsys, "create", str(payload_file), "--dry-run")
    record = json.loads(out)
    assert status == 0
    assert record["operation"] == "CREATE"
    assert record["email"]["to"] == ["ana@example.com"]
    assert record["schedule"]["expression"] == "cron(0 22 16 * ? *)"

  def test_update_without_id(self, payload_file, capsys):
    status, _ = run_cli(capsys, "update", str(payload_file), "--dry-run")
    assert status == 1

  def test_remove(self, cli_env, capsys):
    status, out = run_cli(capsys, "remove", "abc", "--dry-run")
    assert json.loads(out) == {"operation": "REMOVE", "id": "abc"}

  def test_oversized_record(self, cli_env, capsys):
    path = cli_env / "large.yaml"
    path.write_text(
      "email:\n"
      "  from: no-reply@example.com\n"
      "  to: ana@example.com\n"
      "  subject: Your invoice\n"
      f"  body: {'a' * 256_000}\n"
    )
    status, out = run_cli(capsys, "create", str(path), "--dry-run")
    assert status == 1
    assert out == ""

  def test_missing_file(self, cli_env, capsys):
    status, _ = run_cli(capsys, "create", str(cli_env / "nope.yaml"), "--dry-run")
    assert status == 1


class TestSend:
  @patch("entrypoints.notifier_cli.Notifier.create", new_callable=AsyncMock)
  def test_create_prints_response(self, mock_create, payload_file, capsys):
    mock_create.return_value = {"id": "n-1"}
    status, out = run_cli(capsys, "create", str(payload_file))
    assert status == 0
    assert json.loads(out) == {"id": "n-1"}
    sent = mock_create.call_args.args[0]
    assert sent["email"]["subject"] == "Your invoice"

  @patch("entrypoints.notifier_cli.Notifier.remove", new_callable=AsyncMock)
  def test_remove(self, mock_remove, cli_env, capsys):
    mock_remove.return_value = {"removed": True}
    status, out = run_cli(capsys, "remove", "abc")
    mock_remove.assert_called_once_with("abc")
    assert json.loads(out) == {"removed": True}


def test_load_payload_requires_mapping(tmp_path):
  path = tmp_path / "list.yaml"
  path.write_text("- a\n- b\n")
  with pytest.raises(ValueError, match="must contain a mapping"):
    load_payload(path)
