"""
Model Provider Catalog

This package describes the providers written to an agent's models.json.

Key components:
- types: models.json schema (Pydantic models and enums)
- builtin: env-triggered provider definitions
- implicit: environment resolution and explicit/implicit merging

Usage:
    from openclaw_models.providers import EnvSnapshot, resolve_implicit_providers, merge_providers

    env = EnvSnapshot({"MINIMAX_API_KEY": "sk-..."})
    implicit = resolve_implicit_providers(env)
    providers = merge_providers(implicit, explicit_providers)

    for key, provider in providers.items():
        print(key, provider.base_url, provider.model_ids())
"""
from .types import (
    ModelApi,
    ModelInput,
    ModelCost,
    ModelDefinition,
    ProviderConfig,
    ModelsConfig,
    OpenClawConfig,
    ModelsJsonFile,
)
from .builtin import (
    DEFAULT_LOCAL_PROVIDER_KEY,
    IMPLICIT_PROVIDERS,
    MODELS_CONFIG_IMPLICIT_ENV_VARS,
    ImplicitProviderDefinition,
    build_default_local_provider,
    get_implicit_provider,
    get_all_implicit_providers,
    is_implicit_provider,
)
from .implicit import (
    EnvSnapshot,
    resolve_implicit_providers,
    merge_provider,
    merge_providers,
    normalize_providers,
)

__all__ = [
    # Types
    "ModelApi",
    "ModelInput",
    "ModelCost",
    "ModelDefinition",
    "ProviderConfig",
    "ModelsConfig",
    "OpenClawConfig",
    "ModelsJsonFile",
    # Builtin
    "DEFAULT_LOCAL_PROVIDER_KEY",
    "IMPLICIT_PROVIDERS",
    "MODELS_CONFIG_IMPLICIT_ENV_VARS",
    "ImplicitProviderDefinition",
    "build_default_local_provider",
    "get_implicit_provider",
    "get_all_implicit_providers",
    "is_implicit_provider",
    # Resolution
    "EnvSnapshot",
    "resolve_implicit_providers",
    "merge_provider",
    "merge_providers",
    "normalize_providers",
]
