"""
Cron schedule expressions for notifications

Builds the 6-field `cron(minute hour day-of-month month day-of-week year)`
expression understood by the remote scheduler. Day-of-month and day-of-week
can't both be constrained, so exactly one of them is always `?`.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pydantic

from notifier.exceptions import (
  ScheduleConflictError,
  ScheduleFormatError,
  ValidationError,
)
from notifier.models import TEMPORAL_FIELDS, Schedule, ScheduleSpec

logger = logging.getLogger(__name__)

DEFAULT_MINUTE = "0"
DEFAULT_HOUR = "11"  # 8am on GMT-3
WORKING_DAYS = "MON-FRI"


def parse_end(end: str | int) -> int:
  """
  Convert a schedule `end` to epoch milliseconds

  Accepts ISO dates ("2024-05-01"), date-times with a space or "T" separator,
  with or without an offset (naive values are UTC), and integers already in
  epoch milliseconds.
  """
  if isinstance(end, int):
    return end
  try:
    moment = datetime.fromisoformat(end.strip())
  except (ValueError, AttributeError) as e:
    raise ScheduleFormatError(
      "Schedule `end` date format is invalid. Please, use ISO format "
      "(YYYY-MM-DD or YYYY-MM-DD HH:MM)"
    ) from e
  if moment.tzinfo is None:
    moment = moment.replace(tzinfo=timezone.utc)
  return int(moment.timestamp() * 1000)


def _as_spec(spec: Any) -> ScheduleSpec:
  if isinstance(spec, ScheduleSpec):
    return spec
  try:
    return ScheduleSpec.model_validate(spec or {})
  except pydantic.ValidationError as e:
    raise ValidationError(f"Invalid schedule: {e}", "schedule") from e


def build_schedule(
  spec: Any, delay_seconds: int, now: Optional[datetime] = None
) -> Schedule:
  """
  Build the cron expression for a schedule description

  Args:
    spec: ScheduleSpec or mapping with any of minute, hour, day, month,
      weekDay, year, workingDays, end
    delay_seconds: How far ahead a one-shot notification fires
    now: Current instant, defaults to the system clock (UTC)

  Returns:
    Schedule with the caller's fields, `expression`, `once` and `end` in
    epoch milliseconds

  Raises:
    ScheduleConflictError: `day` set together with `weekDay`/`workingDays`
    ScheduleFormatError: `end` can't be parsed
  """
  spec = _as_spec(spec)

  if spec.day and (spec.week_day or spec.working_days):
    raise ScheduleConflictError(
      "The `day` and `weekDay` properties of the schedule can not be set together"
    )

  end = parse_end(spec.end) if spec.end is not None else None

  once = not any(spec.is_set(field) for field in TEMPORAL_FIELDS)
  if once:
    now = now or datetime.now(timezone.utc)
    fire_at = now.astimezone(timezone.utc) + timedelta(seconds=delay_seconds)
    fields = [
      fire_at.minute,
      fire_at.hour,
      fire_at.day,
      fire_at.month,
      "?",
      fire_at.year,
    ]
  else:
    constrains_week = spec.week_day or spec.working_days
    day_of_month = spec.day or ("?" if constrains_week else "*")
    if spec.week_day:
      day_of_week = spec.week_day
    elif spec.working_days:
      day_of_week = WORKING_DAYS
    else:
      day_of_week = "?" if day_of_month != "?" else "*"
    fields = [
      spec.minute or DEFAULT_MINUTE,
      spec.hour or DEFAULT_HOUR,
      day_of_month,
      spec.month or "*",
      day_of_week,
      spec.year or "*",
    ]

  expression = f"cron({' '.join(str(f) for f in fields)})"
  logger.debug(f"Built schedule expression {expression} (once={once})")

  values = spec.model_dump(exclude={"end", "expression", "once"}, exclude_none=True)
  return Schedule(**values, end=end, expression=expression, once=once)
