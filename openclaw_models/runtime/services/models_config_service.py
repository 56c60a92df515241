"""
models.json generation service

Resolves the providers an agent can use (explicit config plus env-triggered
providers) and writes them to <agentDir>/models.json.
"""
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Union

import aiofiles
from pydantic import ValidationError

from openclaw_models.providers import (
    DEFAULT_LOCAL_PROVIDER_KEY,
    EnvSnapshot,
    ModelsJsonFile,
    OpenClawConfig,
    ProviderConfig,
    build_default_local_provider,
    merge_providers,
    normalize_providers,
    resolve_implicit_providers,
)

from ..config import get_settings
from ..errors import InvalidModelsConfigError
from ..paths import ensure_dir, models_json_path, resolve_agent_dir

logger = logging.getLogger(__name__)

ModelsMode = Literal["merge", "replace"]
ConfigInput = Union[OpenClawConfig, Mapping[str, Any], None]
# Raw JSON is kept for existing entries that do not validate
StoredProvider = Union[ProviderConfig, Any]


@dataclass(frozen=True)
class EnsureResult:
    """Outcome of ensure_models_json."""
    agent_dir: Path
    wrote: bool

    @property
    def path(self) -> Path:
        return models_json_path(self.agent_dir)


class ModelsConfigService:
    """models.json resolver/writer"""

    def __init__(
        self,
        env: Optional[Mapping[str, str]] = None,
        default_mode: ModelsMode = "merge",
    ):
        """
        Args:
            env: Environment snapshot; defaults to a copy of os.environ
            default_mode: Mode used when the config does not set models.mode
        """
        self.env = EnvSnapshot.coerce(env)
        self.default_mode = default_mode

    @staticmethod
    def parse_config(config: ConfigInput) -> OpenClawConfig:
        """Validate caller input into an OpenClawConfig."""
        if config is None:
            return OpenClawConfig()
        if isinstance(config, OpenClawConfig):
            return config
        if not isinstance(config, Mapping):
            raise InvalidModelsConfigError(
                f"Config must be a mapping, got {type(config).__name__}"
            )
        try:
            return OpenClawConfig.model_validate(dict(config))
        except ValidationError as e:
            raise InvalidModelsConfigError(
                f"Invalid models config: {e.error_count()} error(s)",
                errors=e.errors(),
            ) from e

    def resolve_agent_dir(self, agent_dir: Union[str, Path, None] = None) -> Path:
        if agent_dir is not None:
            raw = str(agent_dir).strip()
            if raw:
                return Path(raw).expanduser()
        return resolve_agent_dir(self.env)

    def resolve_mode(self, config: OpenClawConfig) -> ModelsMode:
        if config.models is not None and "mode" in config.models.model_fields_set:
            return config.models.mode
        return self.default_mode

    def resolve_providers(self, config: OpenClawConfig) -> Dict[str, ProviderConfig]:
        """
        Merge explicit and env-triggered providers.

        Never returns an empty map: the local ollama provider fills in when
        nothing else is configured.
        """
        implicit = resolve_implicit_providers(self.env)
        providers = merge_providers(implicit, config.explicit_providers)
        if not providers:
            logger.info("No providers configured, using local %s provider", DEFAULT_LOCAL_PROVIDER_KEY)
            providers[DEFAULT_LOCAL_PROVIDER_KEY] = build_default_local_provider()
        return providers

    async def _read_text(self, path: Path) -> Optional[str]:
        try:
            async with aiofiles.open(path, 'r', encoding='utf-8') as f:
                return await f.read()
        except FileNotFoundError:
            return None

    async def _read_existing(self, path: Path) -> Optional[str]:
        """Like _read_text, but a non-UTF-8 file counts as unreadable."""
        try:
            return await self._read_text(path)
        except UnicodeDecodeError as e:
            logger.warning(f"Ignoring unreadable existing models.json at {path}: {e}")
            return None

    @staticmethod
    def _existing_providers(raw: Optional[str], path: Path) -> Dict[str, StoredProvider]:
        """
        Providers already on disk, validated one entry at a time.

        Entries that do not fit ProviderConfig are carried through unchanged.
        """
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable existing models.json at {path}: {e}")
            return {}

        providers = data.get("providers") if isinstance(data, dict) else None
        if not isinstance(providers, dict):
            logger.warning(f"Ignoring existing models.json at {path}: no providers map")
            return {}

        existing: Dict[str, StoredProvider] = {}
        for key, entry in providers.items():
            try:
                existing[key] = ProviderConfig.model_validate(entry)
            except ValidationError as e:
                logger.warning(
                    "Keeping existing provider %s in %s as-is: %d validation error(s)",
                    key,
                    path,
                    e.error_count(),
                )
                existing[key] = entry
        return existing

    @staticmethod
    def render(providers: Mapping[str, StoredProvider]) -> str:
        document = {
            "providers": {
                key: provider.to_json_dict() if isinstance(provider, ProviderConfig) else provider
                for key, provider in providers.items()
            }
        }
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"

    async def _write_atomic(self, target: Path, content: str) -> None:
        """
        Write models.json atomically

        Uses temporary file + replace for atomicity
        """
        ensure_dir(target.parent)
        temp_path = target.with_suffix('.json.tmp')
        try:
            async with aiofiles.open(temp_path, 'w', encoding='utf-8') as f:
                await f.write(content)
            os.chmod(temp_path, 0o600)
            temp_path.replace(target)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

    async def ensure_models_json(
        self,
        config: ConfigInput = None,
        agent_dir: Union[str, Path, None] = None,
    ) -> EnsureResult:
        """
        Make sure <agentDir>/models.json reflects the resolved providers.

        Args:
            config: OpenClaw config (dict or model); only `models` is read
            agent_dir: Overrides the env-derived agent directory

        Returns:
            EnsureResult; wrote is False when the file already had this content
        """
        parsed = self.parse_config(config)
        target_dir = self.resolve_agent_dir(agent_dir)
        target = models_json_path(target_dir)

        providers = self.resolve_providers(parsed)
        existing_raw = await self._read_existing(target)

        mode = self.resolve_mode(parsed)
        stored: Dict[str, StoredProvider] = dict(providers)
        if mode == "merge":
            existing = self._existing_providers(existing_raw, target)
            if existing:
                stored = {**existing, **providers}

        typed = {key: p for key, p in stored.items() if isinstance(p, ProviderConfig)}
        normalized = normalize_providers(typed, self.env)
        content = self.render({key: normalized.get(key, p) for key, p in stored.items()})
        if existing_raw == content:
            logger.debug(f"models.json unchanged at {target}")
            return EnsureResult(agent_dir=target_dir, wrote=False)

        await self._write_atomic(target, content)
        logger.info(
            "Wrote models.json with %d provider(s) to %s (mode=%s)",
            len(stored),
            target,
            mode,
        )
        return EnsureResult(agent_dir=target_dir, wrote=True)

    async def load_models_json(
        self,
        agent_dir: Union[str, Path, None] = None,
    ) -> Optional[ModelsJsonFile]:
        """
        Load models.json; None when it does not exist.

        Raises UnicodeDecodeError or ValidationError for a malformed file.
        """
        target = models_json_path(self.resolve_agent_dir(agent_dir))
        raw = await self._read_text(target)
        if raw is None:
            return None
        return ModelsJsonFile.model_validate_json(raw)


async def ensure_openclaw_models_json(
    config: ConfigInput = None,
    agent_dir: Union[str, Path, None] = None,
    env: Optional[Mapping[str, str]] = None,
) -> EnsureResult:
    """
    Convenience wrapper around ModelsConfigService.ensure_models_json.

    The default mode comes from settings (OPENCLAW_MODELS_MODELS_MODE).
    """
    service = ModelsConfigService(env=env, default_mode=get_settings().models_mode)
    return await service.ensure_models_json(config, agent_dir)
