# tests/shared/test_logger_setup.py
import json
import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from iconsprite.shared.utils.logger import LOG_NAME, get_logger, init_logging, init_logging_from_config


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger(LOG_NAME)
    saved_level, saved_handlers = root.level, list(root.handlers)
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def test_console_only_by_default(clean_root_logger):
    root = init_logging(level="DEBUG")

    assert root is clean_root_logger
    assert root.level == logging.DEBUG
    assert not any(isinstance(h, TimedRotatingFileHandler) for h in root.handlers)
    assert sum(isinstance(h, logging.StreamHandler) for h in root.handlers) == 1


def test_repeated_init_does_not_duplicate_handlers(clean_root_logger):
    init_logging(level="INFO")
    init_logging(level="INFO")

    assert len(clean_root_logger.handlers) == 1


def test_json_file_contains_extra_fields(clean_root_logger, tmp_path):
    log_file = tmp_path / "logs" / "sprite.log"
    init_logging(level="INFO", console=False, json_mode=True, file=str(log_file))

    get_logger("test").warning("packing %s", "done", extra={"icon_count": 3})
    for handler in clean_root_logger.handlers:
        handler.flush()

    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    record = records[-1]
    assert record["message"] == "packing done"
    assert record["level"] == "WARNING"
    assert record["name"] == f"{LOG_NAME}.test"
    assert record["icon_count"] == 3


def test_third_party_loggers_suppressed(clean_root_logger):
    init_logging(level="DEBUG", suppress={"scour": "ERROR"})

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("scour").level == logging.ERROR


def test_init_from_config_section(clean_root_logger):
    root = init_logging_from_config({"level": "WARNING", "console": True, "json": False, "file": None})

    assert root.level == logging.WARNING


def test_get_logger_prefix():
    assert get_logger().name == LOG_NAME
    assert get_logger("exporter").name == f"{LOG_NAME}.exporter"
