"""Tests for tool settings and logging setup."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from openclaw_models.runtime import logging_config
from openclaw_models.runtime.config import Settings


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("OPENCLAW_MODELS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("OPENCLAW_MODELS_MODELS_MODE", raising=False)

    settings = Settings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.log_dir is None
    assert settings.models_mode == "merge"


def test_settings_read_prefixed_env(monkeypatch, tmp_path):
    monkeypatch.setenv("OPENCLAW_MODELS_LOG_LEVEL", "debug")
    monkeypatch.setenv("OPENCLAW_MODELS_MODELS_MODE", "replace")
    monkeypatch.setenv("OPENCLAW_MODELS_LOG_DIR", str(tmp_path))

    settings = Settings(_env_file=None)

    assert settings.log_level == "DEBUG"
    assert settings.models_mode == "replace"
    assert settings.log_dir == tmp_path


def test_settings_reject_unknown_mode(monkeypatch):
    monkeypatch.setenv("OPENCLAW_MODELS_MODELS_MODE", "append")

    with pytest.raises(ValueError):
        Settings(_env_file=None)


def test_setup_logging_adds_rotating_file_handler(tmp_path, restore_root_logger):
    logging_config.setup_logging(level="DEBUG", log_dir=tmp_path, force=True)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, RotatingFileHandler) for h in root.handlers)

    logging.getLogger("openclaw_models.test").info("hello")
    for handler in root.handlers:
        handler.flush()
    assert "hello" in (tmp_path / logging_config.LOG_FILE_NAME).read_text(encoding="utf-8")


def test_setup_logging_is_idempotent(restore_root_logger):
    logging_config.setup_logging(level="INFO", force=True)
    handlers = list(logging.getLogger().handlers)

    logging_config.setup_logging(level="DEBUG")

    assert logging.getLogger().handlers == handlers
