"""
PayloadBuilder: accumulates one log event and ships it.

Typical use:

    builder = PayloadBuilder()
    builder.set_log_type("ingest")
    builder.set_environment("prod")
    builder.set_level("log")
    builder.add_message("imported %s rows", 42).add_prop("rows", 42)
    if not builder.send():
      ...

A builder is meant for a single event: construct, populate, send, discard.
"""

from __future__ import annotations

import inspect
import logging
import sys
from datetime import datetime
from typing import Any, Mapping, Optional, TextIO
from zoneinfo import ZoneInfo

from .config import SDKLogConfig
from .errors import ConfigurationError, DeliveryError, DeliveryFailure
from .models import ExceptionInfo, MethodTrace, Record, SendResult
from .transport import Transport, build_transport, resolve_stream
from .values import Structured, classify, encode_json, iter_messages

_logger = logging.getLogger("sdklog.builder")

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class PayloadBuilder:
  """
  Builds a single ``Record`` through fluent setters and accumulators.

  When mocked, ``send`` still validates and stamps the record but writes it
  as JSON to ``sink`` (stdout by default) instead of delivering it.
  """

  def __init__(
    self,
    mock: Optional[bool] = None,
    *,
    config: Optional[SDKLogConfig] = None,
    transport: Optional[Transport] = None,
    sink: Optional[TextIO] = None,
  ) -> None:
    self.config = config or SDKLogConfig.from_params_or_env()
    self.mocked = self.config.mock if mock is None else bool(mock)
    self._zone = ZoneInfo(self.config.timezone)
    self.record = Record()
    self._transport = transport
    self._sink = sink
    self._url: Optional[str] = None
    self._key: Optional[str] = None
    self._secret: Optional[str] = None

  def set_url(self, url: str) -> None:
    """Base URL of the HTTP ingestion endpoint."""
    self._url = url

  def set_key(self, key: str) -> None:
    self._key = key

  def set_secret(self, secret: str) -> None:
    self._secret = secret

  @property
  def url(self) -> Optional[str]:
    return self._url or self.config.url

  def set_action(self, action: str) -> None:
    self.record.action = action

  def set_log_type(self, log_type: str) -> None:
    self.record.log_type = log_type

  def set_level(self, level: str) -> None:
    """Logical channel, e.g. ``log`` or ``history``."""
    self.record.level = level

  def set_environment(self, env: str) -> None:
    self.record.env = env

  def set_app(self, app: str) -> None:
    self.record.app = app

  def set_uid(self, uid: str) -> None:
    self.record.uid = uid

  def set_table(self, table: str) -> None:
    self.record.table = table

  def set_database(self, database: str) -> None:
    self.record.database = database

  def set_well_executed(self, value: bool) -> None:
    self.record.well_executed = value

  def get_well_executed(self) -> bool:
    self.validate_required(self.record.well_executed, "well executed")
    return bool(self.record.well_executed)

  def add_message(self, message: Any, *args: Any) -> "PayloadBuilder":
    """
    Append one or more message lines.

    Lists and tuples are flattened in order. Mappings and other objects are
    stored as JSON. ``args`` are applied with ``%`` formatting to each
    scalar line.
    """
    self.record.messages.extend(iter_messages(message, args))
    return self

  def set_property(self, key: str, value: Any) -> "PayloadBuilder":
    """
    Store ``value`` under ``key``, replacing any previous value.

    Wrap the value in ``RawJson``, ``Scalar`` or ``Structured`` to choose
    its stored form; untagged values are classified automatically.
    """
    self.record.props[str(key)] = classify(value).render()
    return self

  def set_properties(self, props: Mapping[str, Any]) -> "PayloadBuilder":
    for key, value in props.items():
      self.set_property(key, value)
    return self

  def add_prop(self, key: Any, value: Any = None, group: bool = False) -> "PayloadBuilder":
    """
    Set one property, or every entry of a mapping.

    With ``group=True`` a mapping passed as ``key`` is kept as a single
    JSON entry named by ``value``.
    """
    if isinstance(key, Mapping):
      if not group:
        return self.set_properties(key)
      if not isinstance(value, str):
        raise TypeError("grouped properties need a string name as value")
      return self.set_property(value, Structured(dict(key)))

    return self.set_property(key, value)

  def add_method(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> "PayloadBuilder":
    self.record.methods[name] = MethodTrace(arguments=encode_json(arguments or {}))
    return self

  def add_exception(self, e: Any) -> None:
    """Record ``e`` under the ``exception`` property. Non-exceptions are ignored."""
    if not isinstance(e, BaseException):
      return

    info = ExceptionInfo(
      file=_exception_file(e),
      code=_exception_code(e),
      message=str(e),
    )
    self.set_property("exception", Structured(info))

  def validate_required(self, value: Any, label: str) -> None:
    if value is None:
      raise ConfigurationError(f"{label} not configured.")

  def send(self) -> SendResult:
    """
    Validate, stamp and deliver the record.

    Missing required fields raise ``ConfigurationError``. Delivery problems
    are logged and reported through the returned ``SendResult``.
    """
    self.validate_required(self.record.log_type, "log type")
    if self.config.transport == "http":
      self.validate_required(self.url, "url")
    self.validate_required(self.record.env, "env")
    self.validate_required(self.record.level, "level")

    if self.config.record_caller and "file" not in self.record.props:
      frame = inspect.currentframe()
      if frame is not None and frame.f_back is not None:
        self.set_property("file", frame.f_back.f_code.co_filename)

    self.record.created_at = datetime.now(self._zone).strftime(TIMESTAMP_FORMAT)

    if self.mocked:
      sink = self._sink or sys.stdout
      sink.write(self.record.to_json() + "\n")
      _logger.debug("Mocked send for %s record; rendered instead of delivered", self.record.level)
      return SendResult(ok=True, mocked=True)

    try:
      stream = resolve_stream(self.record.level, self.config.streams)
      transport = self._transport or build_transport(
        self.config,
        url=self._url,
        access_key=self._key,
        secret_key=self._secret,
      )
      response = transport.deliver(stream, self.record.to_json().encode("utf-8"))
    except DeliveryError as exc:
      _logger.warning("sdklog failed to deliver %s record: %s", self.record.level, exc, exc_info=True)
      return SendResult(ok=False, failure=exc.kind, error=str(exc))
    except Exception as exc:
      # Anything else raised while delivering is reported the same way.
      _logger.warning("sdklog failed to deliver %s record: %s", self.record.level, exc, exc_info=True)
      return SendResult(ok=False, failure=DeliveryFailure.TRANSPORT, error=str(exc))

    _logger.debug("Delivered %s record to %s", self.record.level, stream)
    return SendResult(ok=True, stream=stream, response=response)


def _exception_file(e: BaseException) -> Optional[str]:
  tb = e.__traceback__
  if tb is None:
    return None
  while tb.tb_next is not None:
    tb = tb.tb_next
  return tb.tb_frame.f_code.co_filename


def _exception_code(e: BaseException) -> int:
  if isinstance(e, OSError) and isinstance(e.errno, int):
    return e.errno
  code = getattr(e, "code", None)
  if isinstance(code, int) and not isinstance(code, bool):
    return code
  return 0
