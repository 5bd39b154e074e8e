from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import DeliveryFailure


class MethodTrace(BaseModel):
  """
  Arguments a traced method was called with, as JSON text.
  """

  arguments: str = "{}"


class ExceptionInfo(BaseModel):
  """
  Location, code and message extracted from a captured exception.
  """

  file: Optional[str] = None
  code: int = 0
  message: str = ""


class Record(BaseModel):
  """
  The log event being built.

  Attribute names are snake_case; the wire format keeps the camelCase names
  consumers of the streams already index on (``logType``, ``wellExecuted``).
  """

  model_config = ConfigDict(populate_by_name=True)

  messages: List[str] = Field(default_factory=list)
  methods: Dict[str, MethodTrace] = Field(default_factory=dict)
  props: Dict[str, str] = Field(default_factory=dict)

  action: Optional[str] = None
  log_type: Optional[str] = Field(default=None, alias="logType")
  well_executed: Optional[bool] = Field(default=None, alias="wellExecuted")
  level: Optional[str] = None
  env: Optional[str] = None
  app: Optional[str] = None
  uid: Optional[str] = None
  table: Optional[str] = None
  database: Optional[str] = None

  # Stamped by PayloadBuilder.send, never earlier.
  created_at: Optional[str] = None

  def to_dict(self) -> Dict[str, Any]:
    return self.model_dump(by_alias=True, exclude_none=True)

  def to_json(self) -> str:
    return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))


class HttpEnvelope(BaseModel):
  """
  Body posted to the HTTP ingestion endpoint.
  """

  payload: str = Field(..., description="The record, JSON encoded as a string")
  index: str = Field(..., description="Destination stream/index name")


@dataclass(frozen=True)
class SendResult:
  """
  Outcome of ``PayloadBuilder.send``.

  Truthy when the record was delivered (or rendered in mock mode).
  """

  ok: bool
  mocked: bool = False
  stream: Optional[str] = None
  response: Any = None
  failure: Optional[DeliveryFailure] = None
  error: Optional[str] = None

  def __bool__(self) -> bool:
    return self.ok
