"""Shared fixtures."""

import os
import sys
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_environ():
    """Restore os.environ and sys.excepthook after each test; dotenv writes to both freely."""
    saved_environ = dict(os.environ)
    saved_hook = sys.excepthook
    for key in list(os.environ):
        if key.startswith(('BOOTWIRE_', 'SERVICE_DATABASE_')):
            del os.environ[key]

    yield

    os.environ.clear()
    os.environ.update(saved_environ)
    sys.excepthook = saved_hook


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


@pytest.fixture
def project(tmp_path):
    """A project root with a config directory holding two fragments."""
    write(tmp_path / 'config' / 'config.yaml', "app_name: demo\ndebug: true\n")
    write(tmp_path / 'config' / 'database.yaml', "host: localhost\nport: 5432\n")
    return tmp_path
