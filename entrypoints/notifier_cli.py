"""
Command line entrypoint for the notifier client.

Usage:
    notifier create payload.yaml [--dry-run]
    notifier update payload.yaml [--dry-run]
    notifier remove <id> [--dry-run]
    notifier schedule [--day 16 --hour 22 ...]

Configuration is read once from the environment (and .env); see
notifier.config.ENV_VARS.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from notifier.assembler import (
  Notifier,
  assemble_put,
  assemble_remove,
  serialize_record,
)
from notifier.config import NotifierConfig
from notifier.exceptions import NotifierError
from notifier.models import Operation
from notifier.schedule import build_schedule

logger = logging.getLogger(__name__)

SCHEDULE_OPTIONS = ("minute", "hour", "day", "month", "week-day", "year")


def load_payload(path: Path) -> dict[str, Any]:
  """Load a request payload from a YAML (or JSON) file"""
  if not path.exists():
    raise FileNotFoundError(f"Payload file not found: {path}")
  with open(path, "r", encoding="utf-8") as f:
    data = yaml.safe_load(f)
  if not isinstance(data, dict):
    raise ValueError(f"Payload file {path} must contain a mapping")
  return data


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog="notifier",
    description="Create, update and remove scheduled e-mail/SMS notifications.",
  )
  parser.add_argument(
    "--env-file", type=Path, default=None, help="Load configuration from this .env file"
  )
  sub = parser.add_subparsers(dest="command", required=True)

  for command in ("create", "update"):
    p = sub.add_parser(command, help=f"{command.capitalize()} a notification")
    p.add_argument("payload", type=Path, help="YAML or JSON payload file")
    p.add_argument(
      "--dry-run", action="store_true", help="Print the record instead of sending it"
    )

  p = sub.add_parser("remove", help="Remove a notification")
  p.add_argument("id", help="Notification id")
  p.add_argument(
    "--dry-run", action="store_true", help="Print the record instead of sending it"
  )

  p = sub.add_parser("schedule", help="Print the schedule built from the options")
  for option in SCHEDULE_OPTIONS:
    p.add_argument(f"--{option}", default=None)
  p.add_argument("--working-days", action="store_true", default=None)
  p.add_argument("--end", default=None, help="Last date, YYYY-MM-DD or YYYY-MM-DD HH:MM")
  p.add_argument(
    "--delay", type=int, default=None, help="Seconds ahead for one-shot schedules"
  )
  return parser


def _schedule_from_args(args: argparse.Namespace) -> dict[str, Any]:
  values = {
    "minute": args.minute,
    "hour": args.hour,
    "day": args.day,
    "month": args.month,
    "weekDay": args.week_day,
    "year": args.year,
    "workingDays": args.working_days,
    "end": args.end,
  }
  return {k: v for k, v in values.items() if v is not None}


def _print_json(data: Any) -> None:
  print(json.dumps(data, indent=2, ensure_ascii=False))


async def execute(args: argparse.Namespace, config: NotifierConfig) -> Any:
  """Run one parsed command and return what should be printed"""
  if args.command == "schedule":
    if args.delay is not None:
      config = config.configure(delay=args.delay)
    schedule = build_schedule(_schedule_from_args(args), config.delay)
    return schedule.to_wire()

  if args.dry_run:
    if args.command == "remove":
      record = assemble_remove(args.id, config)
    else:
      operation = Operation(args.command.upper())
      record = await assemble_put(operation, load_payload(args.payload), config)
    logger.info(f"Dry run: record is {len(serialize_record(record))} bytes")
    return record.to_wire()

  async with Notifier(config) as notifier:
    if args.command == "remove":
      return await notifier.remove(args.id)
    payload = load_payload(args.payload)
    if args.command == "create":
      return await notifier.create(payload)
    return await notifier.update(payload)


def main(argv: Optional[Sequence[str]] = None) -> int:
  """Parse arguments, run the command and return the exit status"""
  logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
  )
  args = build_parser().parse_args(argv)
  config = NotifierConfig.from_env(args.env_file)

  try:
    result = asyncio.run(execute(args, config))
  except NotifierError as e:
    logger.error(f"[{e.source}] {e.name}: {e.description}")
    return 1
  except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
    logger.error(f"{e}")
    return 1

  if result is not None:
    _print_json(result)
  return 0


def run() -> None:
  sys.exit(main())


if __name__ == "__main__":
  run()
