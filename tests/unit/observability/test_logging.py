"""Unit tests for structlog configuration and get_logger."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog
from structlog.testing import capture_logs

from mp_queue.observability import configure_logging, get_logger


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    level = root.level
    yield
    structlog.reset_defaults()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


class TestGetLogger:
    def test_emits_event_with_context(self) -> None:
        with capture_logs() as logs:
            get_logger("tests").info("queue.test.event", message_id="m-1")
        assert logs == [{"event": "queue.test.event", "log_level": "info", "message_id": "m-1"}]

    def test_initial_values_are_bound(self) -> None:
        with capture_logs() as logs:
            get_logger("tests", shard=2).warning("queue.test.bound")
        assert logs[0]["shard"] == 2
        assert logs[0]["log_level"] == "warning"


class TestConfigureLogging:
    def test_json_output(self, restore_logging: None, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(logging.INFO, json=True)
        get_logger("mp_queue.tests").info("queue.test.json", shard=1)
        line = capsys.readouterr().err.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "queue.test.json"
        assert payload["shard"] == 1
        assert payload["level"] == "info"
        assert payload["logger"] == "mp_queue.tests"
        assert "timestamp" in payload

    def test_level_filtering(self, restore_logging: None, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("WARNING", json=True)
        get_logger("mp_queue.tests").info("queue.test.hidden")
        get_logger("mp_queue.tests").warning("queue.test.shown")
        err = capsys.readouterr().err
        assert "queue.test.hidden" not in err
        assert "queue.test.shown" in err

    def test_console_renderer(self, restore_logging: None, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(logging.DEBUG, json=False)
        get_logger("mp_queue.tests").debug("queue.test.console")
        assert "queue.test.console" in capsys.readouterr().err

    def test_replaces_root_handlers(self, restore_logging: None) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1
