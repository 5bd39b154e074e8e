from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_logger = logging.getLogger("sdklog.config")

TRANSPORTS = ("firehose", "http")

DEFAULT_STREAMS: Dict[str, str] = {"log": "vendala-logs", "history": "vendala-history"}

CONFIG_PATH = Path("_sdklog/config.json")


@dataclass(frozen=True)
class SDKLogConfig:
  """
  Delivery settings for the payload builder.

  Values are sourced from explicit arguments, environment variables and
  the project config file, in that order.
  """

  transport: str = "firehose"
  url: str | None = None
  region: str = "us-east-1"
  api_version: str = "2015-08-04"
  access_key: str | None = None
  secret_key: str | None = None
  timezone: str = "America/Sao_Paulo"
  timeout: float = 5.0
  mock: bool = False
  record_caller: bool = True
  streams: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_STREAMS))

  def __post_init__(self) -> None:
    try:
      ZoneInfo(self.timezone)
    except (ZoneInfoNotFoundError, ValueError):
      raise ValueError(f"Invalid SDKLOG_TIMEZONE '{self.timezone}'. Expected an IANA zone name.") from None

  @classmethod
  def from_env(cls) -> "SDKLogConfig":
    """
    Load configuration from environment variables and the config file.

    Optional:
      - SDKLOG_TRANSPORT (firehose | http, default: firehose)
      - SDKLOG_URL (base URL of the HTTP ingestion endpoint)
      - SDKLOG_AWS_REGION, SDKLOG_AWS_API_VERSION
      - SDKLOG_AWS_ACCESS_KEY, SDKLOG_AWS_SECRET_KEY
      - SDKLOG_TIMEZONE, SDKLOG_TIMEOUT, SDKLOG_MOCK
    """
    return cls.from_params_or_env()

  @classmethod
  def from_params_or_env(
    cls,
    transport: Optional[str] = None,
    url: Optional[str] = None,
    region: Optional[str] = None,
    api_version: Optional[str] = None,
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    timezone: Optional[str] = None,
    timeout: Optional[float] = None,
    mock: Optional[bool] = None,
    record_caller: Optional[bool] = None,
    streams: Optional[Dict[str, str]] = None,
  ) -> "SDKLogConfig":
    """
    Build configuration from explicit parameters, falling back to environment variables.

    Priority:
      1. Explicit function arguments
      2. Environment variables
      3. Config file (_sdklog/config.json)
      4. Defaults
    """
    file_cfg = _read_config_file(CONFIG_PATH)

    def pick(param: Any, env_name: Optional[str], key: str, default: Any) -> Any:
      if param is not None:
        return param
      if env_name:
        raw = os.getenv(env_name)
        if raw is not None and raw.strip() != "":
          return raw.strip()
      if file_cfg.get(key) is not None:
        return file_cfg[key]
      return default

    kind = str(pick(transport, "SDKLOG_TRANSPORT", "transport", "firehose")).lower()
    if kind not in TRANSPORTS:
      raise ValueError(
        f"Invalid SDKLOG_TRANSPORT '{kind}'. Expected one of: {', '.join(TRANSPORTS)}."
      )

    base_url = pick(url, "SDKLOG_URL", "url", None)
    if base_url is not None:
      _validate_url(base_url)

    raw_timeout = pick(timeout, "SDKLOG_TIMEOUT", "timeout", 5.0)
    try:
      timeout_s = float(raw_timeout)
    except (TypeError, ValueError):
      raise ValueError(f"Invalid SDKLOG_TIMEOUT '{raw_timeout}'. Expected a number of seconds.") from None
    if timeout_s <= 0:
      raise ValueError(f"Invalid SDKLOG_TIMEOUT '{raw_timeout}'. Expected a positive value.")

    tz_name = pick(timezone, "SDKLOG_TIMEZONE", "timezone", "America/Sao_Paulo")

    mock_flag = mock if mock is not None else _get_flag("SDKLOG_MOCK", file_cfg.get("mock"), False)
    caller_flag = record_caller if record_caller is not None else _get_flag(None, file_cfg.get("record_caller"), True)

    stream_map = streams or file_cfg.get("streams") or DEFAULT_STREAMS

    return cls(
      transport=kind,
      url=base_url,
      region=pick(region, "SDKLOG_AWS_REGION", "region", "us-east-1"),
      api_version=pick(api_version, "SDKLOG_AWS_API_VERSION", "api_version", "2015-08-04"),
      access_key=pick(access_key, "SDKLOG_AWS_ACCESS_KEY", "access_key", None),
      secret_key=pick(secret_key, "SDKLOG_AWS_SECRET_KEY", "secret_key", None),
      timezone=tz_name,
      timeout=timeout_s,
      mock=mock_flag,
      record_caller=caller_flag,
      streams=dict(stream_map),
    )

  def masked(self) -> Dict[str, Any]:
    """Configuration as a plain dict with the secret key hidden."""
    data = {
      "transport": self.transport,
      "url": self.url,
      "region": self.region,
      "api_version": self.api_version,
      "access_key": self.access_key,
      "secret_key": "****" if self.secret_key else None,
      "timezone": self.timezone,
      "timeout": self.timeout,
      "mock": self.mock,
      "record_caller": self.record_caller,
      "streams": dict(self.streams),
    }
    return data


def _read_config_file(path: Path) -> Dict[str, Any]:
  if not path.exists():
    return {}
  try:
    data = json.loads(path.read_text())
  except (OSError, ValueError) as exc:
    _logger.warning("Ignoring unreadable config file %s: %s", path, exc)
    return {}
  if not isinstance(data, dict):
    return {}
  # Accept either a flat file or one nested under an "sdklog" section.
  section = data.get("sdklog")
  return section if isinstance(section, dict) else data


def _validate_url(url: str) -> None:
  parsed = urlparse(url)
  if parsed.scheme not in ("http", "https") or not parsed.netloc:
    raise ValueError(
      f"Invalid SDKLOG_URL '{url}'. "
      "Expected an http(s) base URL like https://logs.example.com."
    )


def _get_flag(env_name: Optional[str], file_value: Any, default: bool) -> bool:
  """
  Read a boolean flag from the environment, then the config file.

  Accepts common truthy/falsey strings from either source.
  """
  raw = os.getenv(env_name) if env_name else None
  if raw is None:
    if file_value is None:
      return default
    if not isinstance(file_value, str):
      return bool(file_value)
    raw = file_value

  value = raw.strip().lower()
  if value in ("1", "true", "yes", "on"):
    return True
  if value in ("0", "false", "no", "off"):
    return False

  # Unknown value is treated as off.
  return False
