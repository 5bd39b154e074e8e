from __future__ import annotations

from enum import Enum


class DeliveryFailure(Enum):
  """Why a record could not be handed to its destination."""
  ROUTING = "routing"
  TRANSPORT = "transport"


class SDKLogError(Exception):
  """Base class for sdklog errors."""


class ConfigurationError(SDKLogError):
  """
  A required field or setting is missing.

  Raised synchronously by validation and always propagates to the caller.
  """


class DeliveryError(SDKLogError):
  """
  The record could not be delivered.

  ``PayloadBuilder.send`` catches these and reports them through its
  ``SendResult`` instead of raising.
  """

  def __init__(self, message: str, kind: DeliveryFailure = DeliveryFailure.TRANSPORT) -> None:
    super().__init__(message)
    self.kind = kind
