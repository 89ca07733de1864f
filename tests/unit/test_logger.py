"""Log output: stderr format switch and JSON lines in the log file."""

import json
import logging

from hrdash.observability.logger import get_logger, setup_logging, setup_logging_from_config


def test_log_file_gets_json_lines(tmp_path):
    log_file = tmp_path / "logs" / "hrdash.log"
    setup_logging(log_level="INFO", log_format="console", log_file=log_file)
    try:
        logger = get_logger("hrdash.test")
        logger.info("store_ready", count=2)
        logger.debug("too_chatty")
    finally:
        setup_logging()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["event"] == "store_ready"
    assert entry["count"] == 2
    assert entry["app"] == "hrdash"
    assert entry["level"] == "info"


def test_config_section_sets_level():
    setup_logging_from_config({"logging": {"level": "warning", "format": "bogus"}})
    try:
        assert logging.getLogger().level == logging.WARNING
    finally:
        setup_logging()
