"""Tests for configuration and logging setup."""

import io
import sys
from collections.abc import Iterator

import pytest
from loguru import logger

from datadict_sync.config import INDENT_WIDTH, resolve_indent_width
from datadict_sync.logging_config import configure_logging


@pytest.fixture
def restore_logging() -> Iterator[None]:
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_indent_width_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATADICT_SYNC_INDENT", raising=False)
    assert resolve_indent_width() == INDENT_WIDTH


def test_negative_indent_width_is_clamped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATADICT_SYNC_INDENT", "-3")
    assert resolve_indent_width() == 0


@pytest.mark.usefixtures("restore_logging")
def test_configure_logging_filters_debug_unless_verbose() -> None:
    sink = io.StringIO()
    configure_logging(sink=sink)
    logger.debug("hidden")
    logger.info("shown")
    assert "hidden" not in sink.getvalue()
    assert "shown" in sink.getvalue()

    verbose_sink = io.StringIO()
    configure_logging(verbose=True, sink=verbose_sink)
    logger.debug("now visible")
    assert "now visible" in verbose_sink.getvalue()
