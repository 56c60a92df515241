"""
Path helpers for agent state layout.

Layout:
- <state dir>/                       OPENCLAW_STATE_DIR or ~/.openclaw
- <state dir>/agents/main/agent/     default agent dir
- <agent dir>/models.json            generated provider config

OPENCLAW_AGENT_DIR (or the legacy PI_CODING_AGENT_DIR) overrides the agent dir.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

MODELS_JSON_FILENAME = "models.json"
DEFAULT_AGENT_ID = "main"

AGENT_DIR_ENV_VARS = ("OPENCLAW_AGENT_DIR", "PI_CODING_AGENT_DIR")
STATE_DIR_ENV_VAR = "OPENCLAW_STATE_DIR"


def _env_value(env: Mapping[str, str], name: str) -> Optional[str]:
    value = (env.get(name) or "").strip()
    return value or None


def _expand(value: str) -> Path:
    return Path(os.path.expandvars(value)).expanduser()


def resolve_state_dir(env: Mapping[str, str]) -> Path:
    override = _env_value(env, STATE_DIR_ENV_VAR)
    if override:
        return _expand(override)
    return Path.home() / ".openclaw"


def resolve_agent_dir(env: Mapping[str, str]) -> Path:
    """
    Pick the directory models.json lives in.

    Preference order:
    1) OPENCLAW_AGENT_DIR
    2) PI_CODING_AGENT_DIR
    3) <state dir>/agents/main/agent
    """
    for name in AGENT_DIR_ENV_VARS:
        override = _env_value(env, name)
        if override:
            return _expand(override)
    return resolve_state_dir(env) / "agents" / DEFAULT_AGENT_ID / "agent"


def models_json_path(agent_dir: Path) -> Path:
    return agent_dir / MODELS_JSON_FILENAME


def ensure_dir(path: Path) -> None:
    # owner-only
    path.mkdir(parents=True, exist_ok=True, mode=0o700)
