"""
Configuration module for the notifier client
Reads environment defaults once and keeps them in an immutable settings object
"""

import os
import logging
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from platformdirs import user_data_dir
from pydantic import BaseModel, ConfigDict, field_validator

from notifier.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Minimum delay (seconds) before a default one-shot notification fires
MIN_DELAY = 120

# Keys needed to create or update a notification
PUT_REQUIRED = ("api", "app", "template_bucket")
# Sending needs somewhere to send to, removing needs nothing more
SEND_REQUIRED = ("api",)
REMOVE_REQUIRED = SEND_REQUIRED

# Environment variables read by NotifierConfig.from_env
ENV_VARS = {
  "api": "NOTIFIER_API_URL",
  "app": "NOTIFIER_APP_NAME",
  "template_bucket": "NOTIFIER_TEMPLATE_BUCKET",
  "delay": "NOTIFIER_DELAY",
  "region": "AWS_REGION",
  "template_dir": "NOTIFIER_TEMPLATE_DIR",
  "template_url": "NOTIFIER_TEMPLATE_URL",
}


def default_template_dir() -> Path:
  """Per-user directory holding local templates, one subdirectory per bucket"""
  return Path(user_data_dir("notifier")) / "templates"


class NotifierConfig(BaseModel):
  """Notifier settings. Frozen: use configure() to derive a changed copy."""

  model_config = ConfigDict(frozen=True)

  api: Optional[str] = None
  app: Optional[str] = None
  template_bucket: Optional[str] = None
  delay: int = MIN_DELAY
  region: Optional[str] = None
  template_dir: Optional[Path] = None
  template_url: Optional[str] = None

  @field_validator("delay", mode="before")
  @classmethod
  def clamp_delay(cls, v: Any) -> int:
    """Absent delay means the minimum, anything below it is raised to it"""
    if v is None or v == "":
      return MIN_DELAY
    return max(int(v), MIN_DELAY)

  @classmethod
  def from_env(cls, env_file: Optional[str | Path] = None) -> "NotifierConfig":
    """
    Build a configuration from environment variables

    Args:
      env_file: Optional .env file to load first (defaults to ./.env lookup)

    Returns:
      NotifierConfig with every recognized variable applied
    """
    load_dotenv(env_file)
    values = {}
    for key, var in ENV_VARS.items():
      value = os.getenv(var)
      if value:
        values[key] = value
    logger.debug(f"Loaded notifier configuration keys from env: {sorted(values)}")
    return cls(**values)

  def configure(self, **overrides: Any) -> "NotifierConfig":
    """
    Return a new configuration with the given non-empty overrides merged in

    Empty values keep the current setting, so a partial call never unsets
    anything.
    """
    unknown = set(overrides) - set(type(self).model_fields)
    if unknown:
      raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
    values = self.model_dump()
    values.update({k: v for k, v in overrides.items() if v})
    return type(self)(**values)

  def missing(self, *keys: str) -> list[str]:
    """Names of the given keys that are not set"""
    return [key for key in keys if not getattr(self, key)]

  def require(self, *keys: str) -> None:
    """Raise ConfigError listing every unset key among `keys`"""
    missing = self.missing(*(keys or PUT_REQUIRED))
    if missing:
      logger.error(f"Notifier configuration incomplete, missing: {missing}")
      raise ConfigError(missing)

  def resolved_template_dir(self) -> Path:
    return self.template_dir or default_template_dir()
