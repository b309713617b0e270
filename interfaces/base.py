"""Abstract base classes for the notifier's external collaborators"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

SERVICE_NAME = "execute-api"
TEMPLATE_SUFFIX = ".j2"


@dataclass
class OutboundRequest:
  """Signed-request input: everything a signer needs to authenticate a call"""

  url: str
  host: str
  path: str
  body: bytes
  region: Optional[str] = None
  service: str = SERVICE_NAME
  method: str = "POST"
  headers: dict[str, str] = field(
    default_factory=lambda: {"Content-Type": "application/json"}
  )


class RequestSigner(ABC):
  """Abstract base class for request authentication"""

  @abstractmethod
  def sign(self, request: OutboundRequest) -> dict[str, str]:
    """Compute authentication headers for a request

    Args:
      request: The request about to be sent

    Returns:
      Headers to add to the request (e.g. Authorization, X-Amz-Date)
    """
    raise NotImplementedError


class Transport(ABC):
  """Abstract base class for delivering records to the notification API"""

  @abstractmethod
  async def send(self, request: OutboundRequest) -> Any:
    """Send one request and return the parsed JSON response body

    Args:
      request: Request with the serialized record as body
    """
    raise NotImplementedError

  async def aclose(self) -> None:
    """Release any held connections"""
    return None


class TemplateStore(ABC):
  """Abstract base class for template storage"""

  @abstractmethod
  async def get_template(self, bucket: str, name: str) -> str:
    """Fetch raw template source

    Args:
      bucket: Storage location holding the templates
      name: Template name with path, without extension

    Returns:
      Template source text
    """
    raise NotImplementedError

  async def aclose(self) -> None:
    """Release any held connections"""
    return None
