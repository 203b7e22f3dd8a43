"""Tests for pipeweave.log — CLI logging setup."""

import logging

import pytest

from pipeweave.log import configure_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_sets_level() -> None:
    configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG


def test_single_handler_after_repeat_calls() -> None:
    configure_logging("info")
    configure_logging("warning")
    assert len(logging.getLogger().handlers) == 1


def test_unknown_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging("loud")
