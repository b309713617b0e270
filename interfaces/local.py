"""Local filesystem implementation of the template store"""

import asyncio
import logging
from pathlib import Path

from notifier.exceptions import TemplateError
from .base import TEMPLATE_SUFFIX, TemplateStore

logger = logging.getLogger(__name__)


class LocalTemplateStore(TemplateStore):
  """Templates read from `<root>/<bucket>/<name>.j2`"""

  def __init__(self, root: Path | str):
    self.root = Path(root)

  def _path(self, bucket: str, name: str) -> Path:
    base = (self.root / bucket).resolve()
    path = (base / f"{name}{TEMPLATE_SUFFIX}").resolve()
    if not path.is_relative_to(base):
      raise TemplateError(f"Template name '{name}' escapes bucket '{bucket}'")
    return path

  async def get_template(self, bucket: str, name: str) -> str:
    path = self._path(bucket, name)
    try:
      return await asyncio.to_thread(path.read_text, encoding="utf-8")
    except OSError as e:
      logger.error(f"Failed to read template {path}: {e}")
      raise TemplateError.from_exception(
        e, context=f"Template '{name}' not found in bucket '{bucket}'"
      ) from e
