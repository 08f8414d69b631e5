"""Tests for log output formats."""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from pizzaparty.logging import configure_logging


@pytest.fixture(autouse=True)
def restore_console_logging() -> Iterator[None]:
    yield
    configure_logging("console")


def _last_line(capsys: pytest.CaptureFixture[str]) -> str:
    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    assert lines
    return lines[-1]


def test_json_format_renders_event_and_fields(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("json", "info")

    structlog.get_logger("pizzaparty.services.orders").info("Order created", code="COD-21032025-0001")

    record = json.loads(_last_line(capsys))
    assert record["event"] == "Order created"
    assert record["code"] == "COD-21032025-0001"
    assert record["level"] == "info"
    assert record["logger"] == "pizzaparty.services.orders"
    assert record["timestamp"].endswith("Z")


def test_json_format_covers_stdlib_loggers(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("json", "info")

    logging.getLogger("uvicorn.error").warning("Server shutting down")

    record = json.loads(_last_line(capsys))
    assert record["event"] == "Server shutting down"
    assert record["level"] == "warning"


def test_console_format_is_not_json(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("console", "info")

    structlog.get_logger("pizzaparty.services.orders").warning("Order code collision, retrying", attempt=1)

    line = _last_line(capsys)
    assert "Order code collision, retrying" in line
    assert "attempt" in line
    with pytest.raises(json.JSONDecodeError):
        json.loads(line)


def test_level_filters_records(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("json", "warning")

    structlog.get_logger("pizzaparty").info("Order created")

    assert capsys.readouterr().out.strip() == ""
