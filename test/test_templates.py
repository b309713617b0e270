"""
Test template stores and sandboxed rendering
Run with: uv run pytest test/test_templates.py
"""

import httpx
import pytest

from interfaces.http import HttpTemplateStore
from interfaces.local import LocalTemplateStore
from notifier.config import NotifierConfig
from notifier.exceptions import TemplateError
from notifier.templates import TemplateRenderer, create_template_renderer


@pytest.fixture
def template_root(tmp_path):
  bucket = tmp_path / "billing-templates" / "welcome"
  bucket.mkdir(parents=True)
  (bucket / "user.j2").write_text("Hello {{ name }}, you are on {{ plan.title }}.")
  (bucket / "broken.j2").write_text("Hello {{ name ")
  (bucket / "escape.j2").write_text("{{ name.__class__ }}")
  return tmp_path


@pytest.fixture
def renderer(template_root):
  return TemplateRenderer(LocalTemplateStore(template_root))


class TestLocalTemplateStore:
  @pytest.mark.asyncio
  async def test_reads_template(self, template_root):
    store = LocalTemplateStore(template_root)
    source = await store.get_template("billing-templates", "welcome/user")
    assert source.startswith("Hello {{ name }}")

  @pytest.mark.asyncio
  async def test_missing_template(self, template_root):
    store = LocalTemplateStore(template_root)
    with pytest.raises(TemplateError, match="not found"):
      await store.get_template("billing-templates", "welcome/nope")

  @pytest.mark.asyncio
  async def test_path_traversal(self, template_root):
    store = LocalTemplateStore(template_root)
    with pytest.raises(TemplateError, match="escapes bucket"):
      await store.get_template("billing-templates", "../../etc/passwd")


class TestHttpTemplateStore:
  @pytest.mark.asyncio
  async def test_fetches_from_bucket_path(self):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
      seen.append(str(request.url))
      return httpx.Response(200, text="Hi {{ name }}")

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    store = HttpTemplateStore("https://templates.example.com/", client=client)

    source = await store.get_template("billing-templates", "welcome/user")

    assert source == "Hi {{ name }}"
    assert seen == ["https://templates.example.com/billing-templates/welcome/user.j2"]

  @pytest.mark.asyncio
  async def test_not_found(self):
    client = httpx.AsyncClient(
      transport=httpx.MockTransport(lambda request: httpx.Response(404))
    )
    store = HttpTemplateStore("https://templates.example.com", client=client)
    with pytest.raises(TemplateError, match="Failed to fetch template"):
      await store.get_template("billing-templates", "welcome/user")

  @pytest.mark.asyncio
  async def test_aclose_closes_own_client(self):
    store = HttpTemplateStore("https://templates.example.com")
    await store.aclose()
    assert store.client.is_closed

  @pytest.mark.asyncio
  async def test_aclose_keeps_injected_client(self):
    client = httpx.AsyncClient(
      transport=httpx.MockTransport(lambda request: httpx.Response(200))
    )
    store = HttpTemplateStore("https://templates.example.com", client=client)
    await store.aclose()
    assert not client.is_closed

  @pytest.mark.asyncio
  async def test_renderer_aclose_closes_store(self):
    renderer = create_template_renderer(
      NotifierConfig(template_url="https://templates.example.com")
    )
    await renderer.aclose()
    assert renderer.store.client.is_closed


class TestTemplateRenderer:
  @pytest.mark.asyncio
  async def test_render(self, renderer):
    text = await renderer.render(
      "billing-templates", "welcome/user", {"name": "Ana", "plan": {"title": "Pro"}}
    )
    assert text == "Hello Ana, you are on Pro."

  @pytest.mark.asyncio
  async def test_missing_parameter(self, renderer):
    with pytest.raises(TemplateError, match="Failed to render template"):
      await renderer.render("billing-templates", "welcome/user", {"name": "Ana"})

  @pytest.mark.asyncio
  async def test_syntax_error(self, renderer):
    with pytest.raises(TemplateError):
      await renderer.render("billing-templates", "welcome/broken", {"name": "Ana"})

  @pytest.mark.asyncio
  async def test_sandbox_blocks_internals(self, renderer):
    with pytest.raises(TemplateError) as exc:
      await renderer.render("billing-templates", "welcome/escape", {"name": "Ana"})
    assert exc.value.caused_by.startswith("SecurityError")

  def test_render_source_keeps_escaped_params(self):
    renderer = TemplateRenderer(LocalTemplateStore("."))
    assert renderer.render_source("{{ v }}", {"v": "&lt;b&gt;"}) == "&lt;b&gt;"


class TestCreateTemplateRenderer:
  def test_local_by_default(self, config):
    renderer = create_template_renderer(config)
    assert isinstance(renderer.store, LocalTemplateStore)
    assert renderer.store.root == config.template_dir

  def test_http_when_url_set(self, config):
    renderer = create_template_renderer(
      config.configure(template_url="https://templates.example.com")
    )
    assert isinstance(renderer.store, HttpTemplateStore)

  def test_explicit_store(self, config, template_root):
    store = LocalTemplateStore(template_root)
    assert create_template_renderer(config, store).store is store
