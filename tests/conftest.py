from __future__ import annotations

import io
import logging

import pytest

from dropkeys.core.error_reporter import ErrorReporter
from dropkeys.core.keypaths import build_key_index


@pytest.fixture
def sink():
    return io.BytesIO()


@pytest.fixture
def secret_index():
    return build_key_index(["props.secret", "token"])


@pytest.fixture
def error_reporter(tmp_path):
    return ErrorReporter(path=str(tmp_path / "logs" / "errors.jsonl"))


@pytest.fixture
def quiet_logger():
    """
    Isolated logger so driver tests never touch the process-wide 'dropkeys' handlers.
    """
    logger = logging.getLogger("dropkeys.tests")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


@pytest.fixture(autouse=True)
def _no_dropkeys_env(monkeypatch):
    for name in ("DROPKEYS_KEYS", "DROPKEYS_ON_ERROR", "DROPKEYS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _fresh_dropkeys_logger():
    """
    Every test starts and ends with a handler-free 'dropkeys' logger.
    """
    logger = logging.getLogger("dropkeys")

    def _reset() -> None:
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

    _reset()
    yield logger
    _reset()
