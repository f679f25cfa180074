"""Shared fixtures for composeports tests."""
import logging

import pytest


WEB_AND_DB_COMPOSE = """
services:
  web:
    image: nginx:latest
    ports:
      - "80:80"
  db:
    image: postgres:16
    environment:
      - POSTGRES_PASSWORD=
"""


@pytest.fixture
def web_and_db():
    """Compose file with one published service and one internal service."""
    return WEB_AND_DB_COMPOSE


@pytest.fixture
def write_file(tmp_path):
    """Write *content* to a path relative to tmp_path, creating parent dirs."""

    def _write(relpath, content=""):
        target = tmp_path / relpath
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return str(target)

    return _write


@pytest.fixture
def cwd_tree(tmp_path, monkeypatch):
    """Run with tmp_path as working directory so paths render as ./..."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def restore_root_log_level():
    """configure_logging() sets the root level; undo it between tests."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
