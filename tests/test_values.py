from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from sdklog.values import (
  RawJson,
  Scalar,
  Structured,
  classify,
  encode_json,
  is_json_valid,
  iter_messages,
  scalar_text,
)


@pytest.mark.parametrize(
  "text",
  ['{"a": 1}', "[1, 2]", '"quoted"', '{"nested": {"b": [1]}}'],
)
def test_is_json_valid_accepts_non_trivial_json(text):
  assert is_json_valid(text) is True


@pytest.mark.parametrize(
  "text",
  ["42", "1.5", "true", "false", "null", "[]", "{}", '""', "0", "plain text", "{broken", ""],
)
def test_is_json_valid_rejects_scalars_empties_and_garbage(text):
  assert is_json_valid(text) is False


def test_is_json_valid_rejects_non_strings():
  assert is_json_valid({"a": 1}) is False
  assert is_json_valid(42) is False
  assert is_json_valid(None) is False


def test_classify_picks_exactly_one_representation():
  assert classify('{"a":1}') == RawJson('{"a":1}')
  assert classify("42") == Scalar("42")
  assert classify(42) == Scalar(42)
  assert classify(None) == Scalar(None)
  assert classify({"a": 1}) == Structured({"a": 1})
  assert classify([1, 2]) == Structured([1, 2])


def test_classify_keeps_explicit_tags():
  tagged = Scalar('{"looks": "like json"}')
  assert classify(tagged) is tagged
  assert tagged.render() == '{"looks": "like json"}'


def test_scalar_text_forms():
  assert scalar_text(None) == ""
  assert scalar_text(True) == "true"
  assert scalar_text(False) == "false"
  assert scalar_text(42) == "42"
  assert scalar_text(1.5) == "1.5"
  assert scalar_text("x") == "x"


def test_encode_json_keeps_non_ascii_and_is_compact():
  assert encode_json({"cidade": "São Paulo", "n": [1, 2]}) == '{"cidade":"São Paulo","n":[1,2]}'


def test_encode_json_handles_models_dataclasses_and_plain_objects():
  class Item(BaseModel):
    sku: str
    qty: int

  @dataclass
  class Point:
    x: int
    y: int

  class Plain:
    def __init__(self):
      self.name = "widget"
      self._hidden = "secret"

  assert encode_json(Item(sku="A1", qty=2)) == '{"sku":"A1","qty":2}'
  assert encode_json(Point(1, 2)) == '{"x":1,"y":2}'
  assert encode_json(Plain()) == '{"name":"widget"}'


def test_iter_messages_flattens_depth_first():
  lines = list(iter_messages(["a", ["b", ["c", "d"]], "e"]))
  assert lines == ["a", "b", "c", "d", "e"]


def test_iter_messages_formats_scalar_leaves_only():
  lines = list(iter_messages(["row %s", {"pct": "100%"}], ("7",)))
  assert lines == ["row 7", '{"pct":"100%"}']
