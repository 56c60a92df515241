"""
Implicit provider resolution.

Turns an environment snapshot into provider entries and merges them with the
providers a caller configured explicitly. Nothing here reads os.environ
directly; callers pass an EnvSnapshot in.
"""
from __future__ import annotations

import logging
import os
import re
from typing import Dict, Iterable, Iterator, Mapping, Optional

from .builtin import IMPLICIT_PROVIDERS, MODELS_CONFIG_IMPLICIT_ENV_VARS
from .types import ProviderConfig

logger = logging.getLogger(__name__)

_ENV_REFERENCE_RE = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_]*)\}$")
_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class EnvSnapshot(Mapping[str, str]):
    """Read-only copy of environment variables taken at a point in time."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values: Dict[str, str] = dict(values or {})

    @classmethod
    def from_os(cls) -> "EnvSnapshot":
        return cls(os.environ)

    @classmethod
    def coerce(cls, env: Optional[Mapping[str, str]]) -> "EnvSnapshot":
        """Wrap a plain mapping; None means the current process environment."""
        if env is None:
            return cls.from_os()
        if isinstance(env, EnvSnapshot):
            return env
        return cls(env)

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def get_trimmed(self, name: str) -> Optional[str]:
        """Stripped value of `name`, or None when unset or blank."""
        value = self._values.get(name)
        if value is None:
            return None
        value = value.strip()
        return value or None

    def is_set(self, name: str) -> bool:
        return self.get_trimmed(name) is not None


def resolve_implicit_providers(env: EnvSnapshot) -> Dict[str, ProviderConfig]:
    """
    Build provider entries for every catalog env var that is set.

    Only presence matters: the value is never inspected or embedded, and the
    entry's apiKey is the variable's name.

    Args:
        env: Environment snapshot

    Returns:
        Dictionary of provider_key -> ProviderConfig, in catalog order
    """
    providers: Dict[str, ProviderConfig] = {}
    for definition in IMPLICIT_PROVIDERS.values():
        if not env.is_set(definition.env_var):
            continue
        providers[definition.key] = definition.to_provider_config()
        logger.debug(f"Implicit provider {definition.key} enabled by {definition.env_var}")
    return providers


def merge_provider(implicit: ProviderConfig, explicit: ProviderConfig) -> ProviderConfig:
    """
    Merge one implicit provider with the explicit entry for the same key.

    Explicit fields win. Model lists are unioned: explicit models first, then
    implicit models whose id is not already listed.
    """
    merged = implicit.to_json_dict()
    merged.update(explicit.to_json_dict())

    implicit_models = implicit.models or []
    if implicit_models:
        explicit_models = explicit.models or []
        seen = {model.id for model in explicit_models}
        models = list(explicit_models)
        for model in implicit_models:
            if model.id in seen:
                continue
            seen.add(model.id)
            models.append(model)
        merged["models"] = [model.to_json_dict() for model in models]

    return ProviderConfig.model_validate(merged)


def merge_providers(
    implicit: Mapping[str, ProviderConfig],
    explicit: Mapping[str, ProviderConfig],
) -> Dict[str, ProviderConfig]:
    """
    Combine implicit and explicit providers into one map.

    Explicit keys keep their configured position; implicit-only keys follow.
    """
    merged: Dict[str, ProviderConfig] = {}
    for key, provider in explicit.items():
        if key in implicit:
            merged[key] = merge_provider(implicit[key], provider)
        else:
            merged[key] = provider
    for key, provider in implicit.items():
        if key not in merged:
            merged[key] = provider
    return merged


def _normalize_api_key(
    provider_key: str,
    api_key: str,
    env: EnvSnapshot,
    env_vars: Iterable[str],
) -> str:
    api_key = api_key.strip()

    match = _ENV_REFERENCE_RE.match(api_key)
    if match:
        return match.group(1)

    for env_var in env_vars:
        if env.get_trimmed(env_var) == api_key:
            logger.info(
                "Replaced literal API key for provider %s with reference to %s",
                provider_key,
                env_var,
            )
            return env_var

    return api_key


def normalize_providers(
    providers: Mapping[str, ProviderConfig],
    env: EnvSnapshot,
) -> Dict[str, ProviderConfig]:
    """
    Make provider entries safe to persist.

    - `${NAME}` api keys become `NAME`
    - literal secrets matching a recognised env var become that var's name
    - implicit providers with models but no apiKey get their env var name

    Any other apiKey is kept, with a warning when it does not look like an
    env var name.
    """
    normalized: Dict[str, ProviderConfig] = {}
    for key, provider in providers.items():
        api_key = provider.api_key
        if api_key:
            api_key = _normalize_api_key(key, api_key, env, MODELS_CONFIG_IMPLICIT_ENV_VARS) or None
        else:
            definition = IMPLICIT_PROVIDERS.get(key)
            if definition and provider.models and env.is_set(definition.env_var):
                api_key = definition.env_var

        if api_key and not _ENV_NAME_RE.match(api_key):
            logger.warning(
                "apiKey for provider %s is not an env var name; it will be written as given",
                key,
            )

        if api_key != provider.api_key:
            provider = provider.model_copy(update={"api_key": api_key})
        normalized[key] = provider
    return normalized
