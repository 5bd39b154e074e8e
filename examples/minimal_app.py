import logging
import os

from sdklog import PayloadBuilder, setup_logging


def main() -> None:
  # Render records to stdout instead of shipping them
  os.environ.setdefault("SDKLOG_MOCK", "1")

  builder = PayloadBuilder()
  builder.set_log_type("import")
  builder.set_environment("local")
  builder.set_level("log")
  builder.set_app("example-app")
  builder.add_message("imported %s rows", 3).add_prop({"rows": 3, "source": "orders.csv"})
  builder.add_method("import_orders", {"path": "orders.csv"})
  builder.set_well_executed(True)
  builder.send()

  logger = logging.getLogger("example_app")
  logger.setLevel(logging.INFO)
  setup_logging(logger, log_type="worker", env="local", app="example-app")

  logger.info("Example INFO log from minimal app")
  try:
    1 / 0
  except ZeroDivisionError:
    logger.exception("Example ERROR log with exception")


if __name__ == "__main__":
  main()
