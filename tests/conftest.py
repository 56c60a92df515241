"""Shared pytest fixtures for all tests."""

import logging
import pytest
import shutil
import uuid
from pathlib import Path
from typing import Any, Dict

from openclaw_models.providers import MODELS_CONFIG_IMPLICIT_ENV_VARS
from openclaw_models.runtime import logging_config
from openclaw_models.runtime.paths import AGENT_DIR_ENV_VARS, STATE_DIR_ENV_VAR


def _create_workspace_temp_dir(kind: str) -> Path:
    """Create a temporary directory under repository-local .pytest_work."""
    repo_root = Path(__file__).resolve().parents[1]
    root_dir = repo_root / ".pytest_work" / kind
    root_dir.mkdir(parents=True, exist_ok=True)
    temp_dir = root_dir / f"{kind}_{uuid.uuid4().hex[:8]}"
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


@pytest.fixture
def tmp_path():
    """Workspace-local replacement for pytest's tmp_path fixture."""
    temp_dir = _create_workspace_temp_dir("tmp_path")
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def clean_provider_env(monkeypatch):
    """Unset every provider and agent-dir env var for the duration of a test."""
    for name in (*MODELS_CONFIG_IMPLICIT_ENV_VARS, *AGENT_DIR_ENV_VARS, STATE_DIR_ENV_VAR):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def temp_home(clean_provider_env):
    """Point HOME at a throwaway directory so the default agent dir is isolated."""
    home = _create_workspace_temp_dir("home")
    clean_provider_env.setenv("HOME", str(home))
    yield home
    shutil.rmtree(home, ignore_errors=True)


@pytest.fixture
def default_agent_dir(temp_home):
    """Agent dir resolved from the isolated HOME."""
    return temp_home / ".openclaw" / "agents" / "main" / "agent"


@pytest.fixture
def custom_proxy_models_config() -> Dict[str, Any]:
    """Config with a single explicitly configured OpenAI-compatible proxy."""
    return {
        "models": {
            "providers": {
                "custom-proxy": {
                    "baseUrl": "http://localhost:4000/v1",
                    "apiKey": "TEST_KEY",
                    "api": "openai-completions",
                    "models": [
                        {
                            "id": "llama-3.1-8b",
                            "name": "Llama 3.1 8B (Proxy)",
                            "api": "openai-completions",
                            "reasoning": False,
                            "input": ["text"],
                            "cost": {"input": 0, "output": 0, "cacheRead": 0, "cacheWrite": 0},
                            "contextWindow": 128000,
                            "maxTokens": 32000,
                        }
                    ],
                }
            }
        }
    }


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging() changes to the root logger after a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    logging_config._initialized = False
