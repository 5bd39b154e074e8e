from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import NoReturn, Optional, Tuple

from .builder import PayloadBuilder
from .config import SDKLogConfig
from .errors import ConfigurationError


def main(argv: list[str] | None = None) -> NoReturn:
  argv = list(sys.argv[1:] if argv is None else argv)

  if not argv or argv[0] not in {"send", "config"}:
    print("Usage: python -m sdklog {send|config}", file=sys.stderr)
    print("  send    - Build one log event from flags and deliver it", file=sys.stderr)
    print("  config  - Show the resolved delivery configuration", file=sys.stderr)
    sys.exit(1)

  if argv[0] == "send":
    _run_send(argv[1:])
  elif argv[0] == "config":
    _run_config(argv[1:])


def _parse_pair(raw: str, sep: str = "=") -> Tuple[str, Optional[str]]:
  if sep not in raw:
    return raw, None
  key, value = raw.split(sep, 1)
  return key, value


def _build_send_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog="sdklog send",
    description="Build one log event and deliver it",
  )
  parser.add_argument("--log-type", help="Log category label (required)")
  parser.add_argument("--env", help="Deployment environment (required)")
  parser.add_argument("--level", help="Destination channel: log or history (required)")
  parser.add_argument("--action", help="Logical operation name")
  parser.add_argument("--app", help="Owning application")
  parser.add_argument("--uid", help="Correlation identifier")
  parser.add_argument("--table", help="Referenced table")
  parser.add_argument("--database", help="Referenced database")
  parser.add_argument("--url", help="Base URL of the HTTP ingestion endpoint")
  parser.add_argument("--transport", choices=["firehose", "http"], help="Override SDKLOG_TRANSPORT")
  parser.add_argument("--message", action="append", default=[], help="Message line (repeatable)")
  parser.add_argument("--prop", action="append", default=[], metavar="KEY=VALUE", help="Property (repeatable)")
  parser.add_argument("--method", action="append", default=[], metavar="NAME[=JSON]", help="Method trace (repeatable)")
  parser.add_argument("--failed", action="store_true", help="Mark the event as not well executed")
  parser.add_argument("--mock", action="store_true", help="Print the record instead of delivering it")
  parser.add_argument("--verbose", action="store_true", help="Log delivery details to stderr")
  return parser


def _run_send(args: list[str]) -> NoReturn:
  parsed = _build_send_parser().parse_args(args)

  logging.basicConfig(
    level=logging.DEBUG if parsed.verbose else logging.WARNING,
    format="%(levelname)s %(name)s: %(message)s",
  )

  try:
    config = SDKLogConfig.from_params_or_env(
      transport=parsed.transport,
      url=parsed.url,
      mock=True if parsed.mock else None,
    )
  except ValueError as exc:
    print(f"Error: {exc}", file=sys.stderr)
    sys.exit(2)

  builder = PayloadBuilder(config=config)
  for name in ("log_type", "env", "level", "action", "app", "uid", "table", "database"):
    value = getattr(parsed, name)
    if value is None:
      continue
    setter = "set_environment" if name == "env" else f"set_{name}"
    getattr(builder, setter)(value)
  builder.set_well_executed(not parsed.failed)

  for message in parsed.message:
    builder.add_message(message)

  for raw in parsed.prop:
    key, value = _parse_pair(raw)
    builder.set_property(key, value)

  for raw in parsed.method:
    name, raw_args = _parse_pair(raw)
    try:
      arguments = json.loads(raw_args) if raw_args else {}
    except ValueError:
      print(f"Error: --method {name} arguments are not valid JSON", file=sys.stderr)
      sys.exit(2)
    if not isinstance(arguments, dict):
      print(f"Error: --method {name} arguments must be a JSON object", file=sys.stderr)
      sys.exit(2)
    builder.add_method(name, arguments)

  try:
    result = builder.send()
  except ConfigurationError as exc:
    print(f"Error: {exc}", file=sys.stderr)
    sys.exit(2)

  if not result:
    print(f"sdklog: delivery failed ({result.failure.value}): {result.error}", file=sys.stderr)
    sys.exit(1)

  if not result.mocked:
    print(f"sdklog: delivered to {result.stream}")
  sys.exit(0)


def _run_config(args: list[str]) -> NoReturn:
  parser = argparse.ArgumentParser(
    prog="sdklog config",
    description="Show the resolved delivery configuration",
  )
  parser.parse_args(args)

  try:
    config = SDKLogConfig.from_params_or_env()
  except ValueError as exc:
    print(f"Error: {exc}", file=sys.stderr)
    sys.exit(2)

  print(json.dumps(config.masked(), indent=2))
  sys.exit(0)


if __name__ == "__main__":
  main()
