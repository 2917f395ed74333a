"""Shared fixtures for gh-github-mcp-server tests."""

from __future__ import annotations

import io
import logging

import pytest

import gh_mcp.core.logging as gh_logging
from gh_mcp.config.loader import CONFIG_PATH_ENV
from gh_mcp.config.models import SERVER_DIR_ENV, SERVER_PATH_ENV


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch, tmp_path):
    """Keep the developer's environment out of the tests."""
    for name in (SERVER_PATH_ENV, SERVER_DIR_ENV, CONFIG_PATH_ENV):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo configure_logging() so handlers never outlive capsys streams."""
    yield
    logger = logging.getLogger(gh_logging.ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    gh_logging._handler = None


class FakeResponse(io.BytesIO):
    """Minimal stand-in for an http.client.HTTPResponse."""

    def __init__(self, body: bytes, status: int = 200) -> None:
        super().__init__(body)
        self.status = status


@pytest.fixture
def make_response():
    """Build fake responses for a patched ``urlopen``."""
    return FakeResponse
