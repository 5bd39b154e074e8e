import json
from dataclasses import dataclass

import pytest

from sdklog import ConfigurationError, PayloadBuilder, RawJson, Scalar, SDKLogConfig, Structured


@pytest.fixture
def builder():
  return PayloadBuilder(mock=True, config=SDKLogConfig())


def test_new_builder_starts_with_empty_record(builder):
  assert builder.record.messages == []
  assert builder.record.methods == {}
  assert builder.record.props == {}
  assert builder.record.created_at is None


def test_setters_overwrite_fields(builder):
  builder.set_action("import")
  builder.set_action("export")
  builder.set_app("vendala")
  builder.set_uid("42")
  builder.set_table("orders")
  builder.set_database("shop")

  record = builder.record
  assert record.action == "export"
  assert (record.app, record.uid, record.table, record.database) == ("vendala", "42", "orders", "shop")


def test_get_well_executed_before_set_fails_fast(builder):
  with pytest.raises(ConfigurationError, match="well executed not configured."):
    builder.get_well_executed()


def test_well_executed_round_trips(builder):
  builder.set_well_executed(False)
  assert builder.get_well_executed() is False


# Messages

def test_add_message_appends_in_order_and_chains(builder):
  result = builder.add_message("first").add_message("second")
  assert result is builder
  assert builder.record.messages == ["first", "second"]


def test_add_message_flattens_nested_sequences(builder):
  builder.add_message("a")
  builder.add_message(["b", ["c", ("d", ["e"])], "f"])
  assert builder.record.messages == ["a", "b", "c", "d", "e", "f"]


def test_add_message_applies_format_args(builder):
  builder.add_message("imported %s rows into %s", 42, "orders")
  builder.add_message("100% verbatim")
  assert builder.record.messages == ["imported 42 rows into orders", "100% verbatim"]


def test_add_message_threads_format_args_to_nested_leaves(builder):
  builder.add_message(["step %s", ["retry %s"]], "x")
  assert builder.record.messages == ["step x", "retry x"]


def test_add_message_serializes_objects_without_escaping(builder):
  @dataclass
  class Order:
    id: int
    city: str

  builder.add_message({"cliente": "João"})
  builder.add_message(Order(7, "Açailândia"))
  assert builder.record.messages == ['{"cliente":"João"}', '{"id":7,"city":"Açailândia"}']


# Properties

def test_add_prop_scalar_is_stringified(builder):
  builder.add_prop("rows", 42)
  builder.add_prop("ok", True)
  builder.add_prop("missing", None)
  assert builder.record.props == {"rows": "42", "ok": "true", "missing": ""}


def test_add_prop_overwrites_existing_key(builder):
  builder.add_prop("status", "pending")
  builder.add_prop("status", {"code": 200})
  assert builder.record.props == {"status": '{"code":200}'}


def test_add_prop_keeps_valid_json_text_verbatim(builder):
  raw = '{"a": 1, "b": [1, 2]}'
  builder.add_prop("payload", raw)
  assert builder.record.props["payload"] == raw


def test_add_prop_mapping_expands_in_order(builder):
  other = PayloadBuilder(mock=True, config=SDKLogConfig())
  builder.add_prop({"a": 1, "b": {"c": "ç"}, "d": "x"})
  other.add_prop("a", 1).add_prop("b", {"c": "ç"}).add_prop("d", "x")

  assert builder.record.props == other.record.props
  assert list(builder.record.props) == ["a", "b", "d"]
  assert builder.record.props["b"] == '{"c":"ç"}'


def test_add_prop_grouped_mapping_is_stored_as_one_entry(builder):
  builder.add_prop({"a": 1, "b": 2}, "totals", group=True)
  assert builder.record.props == {"totals": '{"a":1,"b":2}'}


def test_add_prop_grouped_mapping_requires_a_name(builder):
  with pytest.raises(TypeError):
    builder.add_prop({"a": 1}, group=True)


def test_set_properties_matches_repeated_set_property(builder):
  builder.set_properties({"x": 1, "y": [1, 2]})
  assert builder.record.props == {"x": "1", "y": "[1,2]"}


def test_tagged_values_choose_their_stored_form(builder):
  builder.set_property("raw", RawJson("[1,2]"))
  builder.set_property("text", Scalar('{"not": "parsed"}'))
  builder.set_property("json", Structured("already a string"))
  assert builder.record.props == {
    "raw": "[1,2]",
    "text": '{"not": "parsed"}',
    "json": '"already a string"',
  }


# Methods

def test_add_method_serializes_arguments_and_overwrites(builder):
  builder.add_method("sync", {"page": 1})
  builder.add_method("sync", {"page": 2, "nome": "ação"})
  builder.add_method("noop")

  methods = builder.record.methods
  assert methods["sync"].arguments == '{"page":2,"nome":"ação"}'
  assert methods["noop"].arguments == "{}"


# Exceptions

def test_add_exception_records_file_code_and_message(builder):
  try:
    raise ValueError("bad row")
  except ValueError as exc:
    builder.add_exception(exc)

  info = json.loads(builder.record.props["exception"])
  assert info["file"].endswith("test_builder_accumulators.py")
  assert info["code"] == 0
  assert info["message"] == "bad row"


def test_add_exception_uses_errno_as_code(builder):
  builder.add_exception(FileNotFoundError(2, "No such file or directory"))
  info = json.loads(builder.record.props["exception"])
  assert info["code"] == 2
  assert info["file"] is None


def test_add_exception_ignores_non_errors(builder):
  builder.add_prop("kept", "yes")
  builder.add_exception("not an exception")
  builder.add_exception(None)
  builder.add_exception({"message": "dict"})
  assert builder.record.props == {"kept": "yes"}
