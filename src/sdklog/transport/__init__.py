from __future__ import annotations

from typing import Optional

from ..config import SDKLogConfig
from .base import Transport, resolve_stream
from .firehose import FirehoseTransport
from .http_transport import HttpTransport


def build_transport(
  config: SDKLogConfig,
  url: Optional[str] = None,
  access_key: Optional[str] = None,
  secret_key: Optional[str] = None,
) -> Transport:
  """
  Build the transport selected by ``config.transport``.

  Values set on the builder (url, credentials) win over the config ones.
  """
  if config.transport == "http":
    base_url = url or config.url
    if not base_url:
      raise ValueError("HTTP transport requires a base URL")
    return HttpTransport(base_url=base_url, timeout=config.timeout)

  return FirehoseTransport(
    region=config.region,
    api_version=config.api_version,
    access_key=access_key or config.access_key,
    secret_key=secret_key or config.secret_key,
    timeout=config.timeout,
  )


__all__ = [
  "FirehoseTransport",
  "HttpTransport",
  "Transport",
  "build_transport",
  "resolve_stream",
]
