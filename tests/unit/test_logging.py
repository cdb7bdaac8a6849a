"""Unit tests for utils/logging.py."""

import io
import json
import logging

from tests.helpers.token_factory import TEST_SECRET
from tokengate.auth.authenticator import create_authenticator
from tokengate.config import Settings
from tokengate.utils.logging import HANDLER_NAME, setup_logging


def _installed() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]


def test_json_logging_renders_stdlib_records():
    stream = io.StringIO()
    setup_logging("DEBUG", "json", stream=stream)

    logging.getLogger("tokengate.tests").info("Issued token %s", "abc")

    record = json.loads(stream.getvalue().splitlines()[-1])
    assert record["event"] == "Issued token abc"
    assert record["level"] == "info"
    assert record["logger"] == "tokengate.tests"
    assert "timestamp" in record


def test_level_filters_debug():
    stream = io.StringIO()
    setup_logging("WARNING", "console", stream=stream)

    logging.getLogger("tokengate.tests").debug("hidden")
    logging.getLogger("tokengate.tests").warning("shown")

    out = stream.getvalue()
    assert "hidden" not in out
    assert "shown" in out
    assert logging.getLogger("redis").level == logging.WARNING


def test_reconfiguring_replaces_handler():
    setup_logging("INFO", "json", stream=io.StringIO())
    setup_logging("INFO", "json", stream=io.StringIO())

    assert len(_installed()) == 1


def test_create_authenticator_applies_log_settings(store):
    settings = Settings(jwt_secret_key=TEST_SECRET, log_level="ERROR", log_format="console")

    create_authenticator(store, settings=settings)

    assert logging.getLogger().level == logging.ERROR
    assert len(_installed()) == 1
