"""HTTP implementations of the collaborator interfaces, using httpx"""

import logging
from typing import Any, Optional

import httpx

from notifier.exceptions import TemplateError, TransportError
from .base import (
  TEMPLATE_SUFFIX,
  OutboundRequest,
  RequestSigner,
  TemplateStore,
  Transport,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def make_request(api: str, body: bytes, region: Optional[str] = None) -> OutboundRequest:
  """Build the POST request for an API endpoint URL"""
  url = httpx.URL(api)
  return OutboundRequest(
    url=str(url),
    host=url.netloc.decode("ascii"),
    path=url.raw_path.decode("ascii") or "/",
    body=body,
    region=region,
  )


class HttpTransport(Transport):
  """Posts records with httpx, optionally adding signer headers"""

  def __init__(
    self,
    client: Optional[httpx.AsyncClient] = None,
    signer: Optional[RequestSigner] = None,
    timeout: float = DEFAULT_TIMEOUT,
  ):
    self._owns_client = client is None
    self.client = client or httpx.AsyncClient(timeout=timeout)
    self.signer = signer

  async def send(self, request: OutboundRequest) -> Any:
    headers = dict(request.headers)
    if self.signer:
      headers.update(self.signer.sign(request))

    try:
      response = await self.client.request(
        request.method, request.url, content=request.body, headers=headers
      )
      response.raise_for_status()
    except httpx.HTTPStatusError as e:
      logger.error(f"Notification API rejected request: {e.response.status_code}")
      raise TransportError.from_exception(
        e, context=f"Notification API responded {e.response.status_code}"
      ) from e
    except httpx.HTTPError as e:
      logger.error(f"Failed to reach notification API at {request.host}: {e}")
      raise TransportError.from_exception(
        e, context="Failed to reach notification API"
      ) from e

    logger.info(f"Notification API responded {response.status_code}")
    if not response.content:
      return None
    try:
      return response.json()
    except ValueError as e:
      logger.error(f"Notification API returned a non-JSON body: {response.text[:200]}")
      raise TransportError.from_exception(
        e, context="Notification API returned invalid JSON"
      ) from e

  async def aclose(self) -> None:
    if self._owns_client:
      await self.client.aclose()


class HttpTemplateStore(TemplateStore):
  """Reads templates from an object store exposed over HTTP

  Templates live at `<base_url>/<bucket>/<name>.j2`.
  """

  def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None):
    self.base_url = base_url.rstrip("/")
    self._owns_client = client is None
    self.client = client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)

  async def get_template(self, bucket: str, name: str) -> str:
    url = f"{self.base_url}/{bucket}/{name}{TEMPLATE_SUFFIX}"
    try:
      response = await self.client.get(url)
      response.raise_for_status()
    except httpx.HTTPError as e:
      raise TemplateError.from_exception(
        e, context=f"Failed to fetch template '{name}' from bucket '{bucket}'"
      ) from e
    return response.text

  async def aclose(self) -> None:
    if self._owns_client:
      await self.client.aclose()
