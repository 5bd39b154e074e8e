from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import DeliveryError

_logger = logging.getLogger("sdklog.transport.firehose")


class FirehoseTransport:
  """
  Puts records on a Kinesis Data Firehose delivery stream.

  Static credentials are used only when both key and secret are given;
  otherwise boto3 resolves credentials from the environment, profile or
  instance role. One attempt per record: botocore retries are disabled.
  """

  def __init__(
    self,
    region: str = "us-east-1",
    api_version: str = "2015-08-04",
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    timeout: float = 5.0,
    client: Any = None,
  ) -> None:
    self.region = region
    self.api_version = api_version
    self.access_key = access_key
    self.secret_key = secret_key
    self.timeout = timeout
    self._client = client

  @property
  def client(self) -> Any:
    if self._client is None:
      self._client = self._create_client()
    return self._client

  def _create_client(self) -> Any:
    kwargs = {
      "region_name": self.region,
      "api_version": self.api_version,
      "config": Config(
        connect_timeout=self.timeout,
        read_timeout=self.timeout,
        retries={"total_max_attempts": 1},
      ),
    }
    if self.access_key and self.secret_key:
      kwargs["aws_access_key_id"] = self.access_key
      kwargs["aws_secret_access_key"] = self.secret_key
    return boto3.client("firehose", **kwargs)

  def deliver(self, stream: str, data: bytes) -> Any:
    try:
      response = self.client.put_record(
        DeliveryStreamName=stream,
        Record={"Data": data},
      )
    except (ClientError, BotoCoreError) as exc:
      raise DeliveryError(f"firehose put_record to '{stream}' failed: {exc}") from exc

    _logger.debug("Delivered record %s to firehose stream %s", response.get("RecordId"), stream)
    return response
