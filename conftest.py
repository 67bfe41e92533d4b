"""Pytest configuration and shared fixtures."""

import logging

import pytest

from envstore.config.config_store import reset_store

# Variables read by the default sections
DEFAULT_SECTION_VARS = [
    'APP_NAME', 'APP_ENV', 'APP_DEBUG', 'APP_URL', 'APP_TIMEZONE',
    'DB_CONNECTION', 'DB_HOST', 'DB_PORT', 'DB_DATABASE', 'DB_USERNAME',
    'DB_PASSWORD', 'DB_CHARSET', 'DB_COLLATION', 'DB_PREFIX',
    'CACHE_DRIVER', 'REDIS_HOST', 'REDIS_PORT', 'REDIS_PASSWORD',
    'LOG_CHANNEL', 'LOG_LEVEL',
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host environment variables out of resolution."""
    for name in DEFAULT_SECTION_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_store()
    yield
    reset_store()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler changes made by setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def write_env(tmp_path):
    """Write an env file under tmp_path and return its path."""

    def _write(content: str, name: str = '.env'):
        path = tmp_path / name
        path.write_text(content, encoding='utf-8')
        return path

    return _write
