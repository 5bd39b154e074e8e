from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..errors import DeliveryError
from ..models import HttpEnvelope

_logger = logging.getLogger("sdklog.transport.http")


class HttpTransport:
  """
  Posts records to an HTTP ingestion endpoint at ``{base_url}/logs``.

  The record travels JSON encoded inside an envelope that also names the
  destination index. The response body is returned as-is; its status is
  not inspected.
  """

  def __init__(
    self,
    base_url: str,
    timeout: float = 5.0,
    client: Optional[httpx.Client] = None,
  ) -> None:
    self.base_url = base_url.rstrip("/")
    self.timeout = timeout
    self._client = client

  @property
  def endpoint(self) -> str:
    return f"{self.base_url}/logs"

  def deliver(self, stream: str, data: bytes) -> str:
    envelope = HttpEnvelope(payload=data.decode("utf-8"), index=stream)
    body = envelope.model_dump_json().encode("utf-8")

    try:
      if self._client is not None:
        response = self._client.post(
          self.endpoint,
          content=body,
          headers={"Content-Type": "application/json"},
          timeout=self.timeout,
        )
      else:
        with httpx.Client(timeout=self.timeout) as client:
          response = client.post(
            self.endpoint,
            content=body,
            headers={"Content-Type": "application/json"},
          )
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeError) as exc:
      raise DeliveryError(f"POST {self.endpoint} failed: {exc}") from exc

    _logger.debug("POST %s -> %s", self.endpoint, response.status_code)
    return response.text
