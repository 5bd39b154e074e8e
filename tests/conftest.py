import json
from typing import Any, List, Tuple

import pytest

from sdklog.errors import DeliveryError


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
  """Run every test in an empty directory with no SDKLOG_* variables set."""
  for name in (
    "SDKLOG_TRANSPORT",
    "SDKLOG_URL",
    "SDKLOG_AWS_REGION",
    "SDKLOG_AWS_API_VERSION",
    "SDKLOG_AWS_ACCESS_KEY",
    "SDKLOG_AWS_SECRET_KEY",
    "SDKLOG_TIMEZONE",
    "SDKLOG_TIMEOUT",
    "SDKLOG_MOCK",
  ):
    monkeypatch.delenv(name, raising=False)
  monkeypatch.chdir(tmp_path)
  return tmp_path


class RecordingTransport:
  """Transport double that keeps every delivery in memory."""

  def __init__(self, response: Any = "ok") -> None:
    self.calls: List[Tuple[str, bytes]] = []
    self.response = response

  def deliver(self, stream: str, data: bytes) -> Any:
    self.calls.append((stream, data))
    return self.response

  def payloads(self) -> List[dict]:
    return [json.loads(data) for _stream, data in self.calls]


class FailingTransport:
  def __init__(self, message: str = "service unavailable") -> None:
    self.message = message
    self.attempts = 0

  def deliver(self, stream: str, data: bytes) -> Any:
    self.attempts += 1
    raise DeliveryError(self.message)


@pytest.fixture
def recording_transport():
  return RecordingTransport()


@pytest.fixture
def failing_transport():
  return FailingTransport()
