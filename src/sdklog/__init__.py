"""
sdklog

Builds structured log events (messages, method traces, properties and
exceptions) and ships each one to a Kinesis Firehose stream or an HTTP
ingestion endpoint.
"""

from .builder import PayloadBuilder
from .config import SDKLogConfig
from .errors import ConfigurationError, DeliveryError, DeliveryFailure, SDKLogError
from .logging_setup import SDKLogHandler, setup_logging
from .models import Record, SendResult
from .values import RawJson, Scalar, Structured

__all__ = [
  "ConfigurationError",
  "DeliveryError",
  "DeliveryFailure",
  "PayloadBuilder",
  "RawJson",
  "Record",
  "SDKLogConfig",
  "SDKLogError",
  "SDKLogHandler",
  "Scalar",
  "SendResult",
  "Structured",
  "setup_logging",
]
