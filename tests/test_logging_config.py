from __future__ import annotations

import json
import logging

from equipment_tracker.core import logging_config


def test_setup_logging_emits_json_with_service(capsys):
    logging_config.setup_logging(service_name="tracker-test", level="INFO")
    logging.getLogger("equipment_tracker.test").info("hello", extra={"equipment_id": 3})

    line = capsys.readouterr().err.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "hello"
    assert payload["service"] == "tracker-test"
    assert payload["equipment_id"] == 3


def test_setup_logging_only_configures_once():
    logging_config.setup_logging(level="INFO")
    handlers = list(logging.getLogger().handlers)
    logging_config.setup_logging(level="DEBUG")
    assert logging.getLogger().handlers == handlers
    assert logging.getLogger().level == logging.INFO


def test_reset_logging_allows_reconfiguration():
    logging_config.setup_logging(level="INFO")
    logging_config.reset_logging()
    logging_config.setup_logging(level="DEBUG")
    assert logging.getLogger().level == logging.DEBUG
