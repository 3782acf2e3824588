"""Tests for shared observability logging."""

import logging
import time

import pytest

from supplier_matching.observability import get_logger


def test_get_logger_formats_utc_timestamps(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    fixed = time.struct_time((2027, 6, 12, 14, 30, 5, 5, 163, 0))

    def fake_gmtime(_: float | None = None) -> time.struct_time:
        return fixed

    monkeypatch.setattr(time, "gmtime", fake_gmtime)

    name = "supplier_matching.test.logging"
    logger = get_logger(name)
    logger.info("Ranked %s candidates", 4)

    captured = capsys.readouterr()
    expected = "2027-06-12T14:30:05+0000 INFO supplier_matching.test.logging: Ranked 4 candidates"
    assert expected in captured.err


def test_get_logger_is_singleton_per_name() -> None:
    name = "supplier_matching.test.logging.singleton"
    logger = get_logger(name)
    logger_again = get_logger(name, level=logging.DEBUG)

    assert logger is logger_again
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.propagate is False


def test_short_names_are_placed_under_package_namespace() -> None:
    logger = get_logger("test.logging.short")

    assert logger.name == "supplier_matching.test.logging.short"
    assert get_logger("supplier_matching.test.logging.short") is logger
