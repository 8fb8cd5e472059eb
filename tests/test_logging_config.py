import logging

import pytest

from backend.logging_config import setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def _ours(root):
    return [h for h in root.handlers if getattr(h, "_coachlix", False)]


def test_setup_logging_is_idempotent(root_logger, monkeypatch):
    monkeypatch.setenv("COACHLIX_LOG_LEVEL", "debug")
    setup_logging()
    setup_logging()
    assert len(_ours(root_logger)) == 1
    assert root_logger.level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_unknown_level_falls_back_to_info(root_logger):
    setup_logging("chatty")
    assert root_logger.level == logging.INFO
