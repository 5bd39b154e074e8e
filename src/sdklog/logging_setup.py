from __future__ import annotations

import logging
from logging import Handler, LogRecord
from typing import Optional

from .builder import PayloadBuilder
from .config import SDKLogConfig
from .transport import Transport


class SDKLogHandler(Handler):
  """
  Logging handler that ships each record as one sdklog event.
  """

  def __init__(
    self,
    config: SDKLogConfig,
    *,
    log_type: str,
    env: str,
    level: str = "log",
    app: Optional[str] = None,
    transport: Optional[Transport] = None,
  ) -> None:
    super().__init__()
    self._config = config
    self._log_type = log_type
    self._env = env
    self._level = level
    self._app = app
    self._transport = transport

  def build(self, record: LogRecord) -> PayloadBuilder:
    builder = PayloadBuilder(config=self._config, transport=self._transport)
    builder.set_log_type(self._log_type)
    builder.set_environment(self._env)
    builder.set_level(self._level)
    if self._app:
      builder.set_app(self._app)
    builder.set_action(record.funcName)
    builder.set_well_executed(record.levelno < logging.ERROR)

    builder.add_message(record.getMessage())
    builder.set_properties({
      "logger": record.name,
      "severity": record.levelname,
      "file": record.pathname,
      "line": record.lineno,
    })

    if record.exc_info:
      builder.add_exception(record.exc_info[1])
    return builder

  def emit(self, record: LogRecord) -> None:
    try:
      self.build(record).send()
    except Exception:
      # Never break application logging.
      self.handleError(record)


def setup_logging(
  logger: Optional[logging.Logger] = None,
  *,
  log_type: str,
  env: str,
  level: str = "log",
  app: Optional[str] = None,
  config: Optional[SDKLogConfig] = None,
  transport: Optional[Transport] = None,
) -> SDKLogHandler:
  """
  Attach an ``SDKLogHandler`` to a standard library logger.

  Existing handlers are left in place. Calling this twice for the same
  logger returns the handler attached the first time.
  """
  target_logger = logger or logging.getLogger()

  for existing in target_logger.handlers:
    if isinstance(existing, SDKLogHandler):
      return existing

  handler = SDKLogHandler(
    config or SDKLogConfig.from_params_or_env(),
    log_type=log_type,
    env=env,
    level=level,
    app=app,
    transport=transport,
  )
  target_logger.addHandler(handler)
  return handler
