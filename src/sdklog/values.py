"""
Value normalization shared by the payload builder.

Property values are stored as text. Callers can say how a value should be
stored by wrapping it in one of the tagged types below; untagged values are
classified by ``classify`` using the JSON-validity rule.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from typing import Any, Iterator, Sequence, Union

from pydantic import BaseModel

ScalarType = Union[None, bool, int, float, str]

_SCALARS = (bool, int, float, str)


@dataclasses.dataclass(frozen=True)
class RawJson:
  """JSON text that is already serialized and is stored verbatim."""

  text: str

  def render(self) -> str:
    return self.text


@dataclasses.dataclass(frozen=True)
class Scalar:
  """A scalar stored as its string form."""

  value: ScalarType

  def render(self) -> str:
    return scalar_text(self.value)


@dataclasses.dataclass(frozen=True)
class Structured:
  """A mapping, sequence or object stored as JSON text."""

  value: Any

  def render(self) -> str:
    return encode_json(self.value)


PropertyValue = Union[RawJson, Scalar, Structured]


def _default(obj: Any) -> Any:
  if isinstance(obj, BaseModel):
    return obj.model_dump(mode="json", by_alias=True)
  if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
    return dataclasses.asdict(obj)
  if isinstance(obj, (datetime, date)):
    return obj.isoformat()
  if isinstance(obj, (set, frozenset)):
    return list(obj)
  if isinstance(obj, bytes):
    return obj.decode("utf-8", errors="replace")
  if hasattr(obj, "__dict__"):
    # Public attributes only, like a plain object dump.
    return {k: v for k, v in vars(obj).items() if not k.startswith("_")}
  raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def encode_json(value: Any) -> str:
  """
  Serialize ``value`` to compact JSON with non-ASCII characters kept literally.
  """
  return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=_default)


def scalar_text(value: ScalarType) -> str:
  if value is None:
    return ""
  if isinstance(value, bool):
    return "true" if value else "false"
  return str(value)


def is_json_valid(text: Any) -> bool:
  """
  True when ``text`` is JSON whose decoded value is non-empty and differs
  from the text itself.

  Numbers and booleans compare equal to their own literal, so ``"42"`` and
  ``"true"`` are not considered JSON here; non-empty objects, arrays and
  quoted strings are.
  """
  if not isinstance(text, str):
    return False

  try:
    decoded = json.loads(text)
  except ValueError:
    return False

  if not decoded:
    return False
  if isinstance(decoded, (bool, int, float)):
    return False
  return decoded != text


def classify(value: Any) -> PropertyValue:
  if isinstance(value, (RawJson, Scalar, Structured)):
    return value
  if is_json_valid(value):
    return RawJson(value)
  if value is None or isinstance(value, _SCALARS):
    return Scalar(value)
  return Structured(value)


def iter_messages(message: Any, args: Sequence[Any] = ()) -> Iterator[str]:
  """
  Flatten ``message`` into message lines, depth first and left to right.

  ``%`` formatting with ``args`` is applied to scalar leaves only; structured
  leaves are serialized as JSON.
  """
  if isinstance(message, (list, tuple)):
    for item in message:
      yield from iter_messages(item, args)
    return

  if message is not None and not isinstance(message, _SCALARS):
    yield encode_json(message)
    return

  text = scalar_text(message)
  yield text % tuple(args) if args else text
