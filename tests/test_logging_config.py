import logging

import pytest
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer

from core.logging_config import configure_logging, get_renderer, resolve_level


@pytest.mark.parametrize(
    "name,debug,expected",
    [
        ("INFO", False, logging.INFO),
        ("warning", False, logging.WARNING),
        ("ERROR", True, logging.DEBUG),
        ("nonsense", False, logging.INFO),
    ],
)
def test_resolve_level(name, debug, expected):
    assert resolve_level(name, debug) == expected


def test_renderer_follows_debug():
    assert isinstance(get_renderer(True), ConsoleRenderer)
    assert isinstance(get_renderer(False), JSONRenderer)


def test_configure_logging_overrides():
    root = logging.getLogger()
    try:
        configure_logging(level="ERROR", debug=False)
        assert root.level == logging.ERROR
        assert len(root.handlers) == 1
    finally:
        configure_logging()
