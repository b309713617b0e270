"""Collaborator interfaces - transport, signing and template storage

Concrete implementations live next to the base classes:
- http.py: httpx transport and HTTP object-store templates
- local.py: templates read from a local directory
"""

from .base import OutboundRequest, RequestSigner, TemplateStore, Transport

__all__ = [
  "OutboundRequest",
  "RequestSigner",
  "TemplateStore",
  "Transport",
]
