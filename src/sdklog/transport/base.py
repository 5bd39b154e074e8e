from __future__ import annotations

from typing import Any, Mapping, Protocol

from ..errors import DeliveryError, DeliveryFailure


class Transport(Protocol):
  """
  Delivers one serialized record to a named stream.

  Implementations wrap their library errors in ``DeliveryError``.
  """

  def deliver(self, stream: str, data: bytes) -> Any:
    ...


def resolve_stream(level: str, streams: Mapping[str, str]) -> str:
  """
  Map a record level onto its destination stream.

  There is no default channel: an unknown level is a routing failure.
  """
  try:
    return streams[level]
  except KeyError:
    raise DeliveryError(
      f"no stream configured for level '{level}'",
      kind=DeliveryFailure.ROUTING,
    ) from None
