"""
E-mail template rendering

Templates are Jinja2 sources rendered in a sandbox: the e-mail `body` mapping is
the only context, undefined names fail the render and templates can't reach
Python internals. Rendering here only proves the template works with the given
parameters; the remote sender renders again when the e-mail goes out.
"""

import logging
from typing import Any, Optional

import jinja2
from jinja2.sandbox import SandboxedEnvironment

from interfaces.base import TemplateStore
from interfaces.http import HttpTemplateStore
from interfaces.local import LocalTemplateStore
from notifier.config import NotifierConfig
from notifier.exceptions import TemplateError

logger = logging.getLogger(__name__)


class TemplateRenderer:
  """Fetches templates from a store and renders them in a Jinja2 sandbox"""

  def __init__(self, store: TemplateStore):
    self.store = store
    self.env = SandboxedEnvironment(
      undefined=jinja2.StrictUndefined, autoescape=False, keep_trailing_newline=True
    )

  def render_source(self, source: str, params: dict[str, Any]) -> str:
    try:
      return self.env.from_string(source).render(params)
    except jinja2.TemplateError as e:
      raise TemplateError.from_exception(e, context="Failed to render template") from e

  async def render(self, bucket: str, name: str, params: dict[str, Any]) -> str:
    """
    Fetch and render a template

    Args:
      bucket: Template storage location
      name: Template name with path
      params: Template parameters (the e-mail body)

    Returns:
      Rendered text

    Raises:
      TemplateError: the template can't be fetched or rendered
    """
    source = await self.store.get_template(bucket, name)
    rendered = self.render_source(source, params)
    logger.debug(f"Rendered template '{name}' from bucket '{bucket}'")
    return rendered

  async def aclose(self) -> None:
    await self.store.aclose()


def create_template_renderer(
  config: NotifierConfig, store: Optional[TemplateStore] = None
) -> TemplateRenderer:
  """
  Factory for the renderer matching the configuration.

  An explicit store wins; otherwise `template_url` selects the HTTP store and
  the local template directory is the fallback.
  """
  if store is None:
    if config.template_url:
      logger.info(f"Using HTTP template store at {config.template_url}")
      store = HttpTemplateStore(config.template_url)
    else:
      template_dir = config.resolved_template_dir()
      logger.info(f"Using local template store at {template_dir}")
      store = LocalTemplateStore(template_dir)
  return TemplateRenderer(store)
