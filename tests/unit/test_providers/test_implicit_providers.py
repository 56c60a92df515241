"""Tests for env-driven provider resolution and merging."""

import logging

from openclaw_models.providers import (
    IMPLICIT_PROVIDERS,
    MODELS_CONFIG_IMPLICIT_ENV_VARS,
    EnvSnapshot,
    ModelDefinition,
    ProviderConfig,
    build_default_local_provider,
    get_implicit_provider,
    merge_providers,
    normalize_providers,
    resolve_implicit_providers,
)


def test_env_vars_cover_every_catalog_entry():
    assert len(MODELS_CONFIG_IMPLICIT_ENV_VARS) == len(IMPLICIT_PROVIDERS)
    assert "MINIMAX_API_KEY" in MODELS_CONFIG_IMPLICIT_ENV_VARS
    assert "SYNTHETIC_API_KEY" in MODELS_CONFIG_IMPLICIT_ENV_VARS


def test_catalog_models_are_non_empty_except_local_ollama():
    for key, definition in IMPLICIT_PROVIDERS.items():
        if key == "ollama":
            continue
        assert definition.models, key


def test_no_env_resolves_nothing():
    assert resolve_implicit_providers(EnvSnapshot({})) == {}


def test_blank_env_value_counts_as_unset():
    env = EnvSnapshot({"MINIMAX_API_KEY": "   "})

    assert resolve_implicit_providers(env) == {}
    assert env.get_trimmed("MINIMAX_API_KEY") is None


def test_minimax_entry_uses_env_var_name_not_value():
    providers = resolve_implicit_providers(EnvSnapshot({"MINIMAX_API_KEY": "sk-minimax-test"}))

    minimax = providers["minimax"]
    assert minimax.base_url == "https://api.minimax.io/anthropic"
    assert minimax.api_key == "MINIMAX_API_KEY"
    assert minimax.api == "anthropic-messages"
    assert minimax.model_ids()[:1] == ["MiniMax-M2.1"]
    assert "MiniMax-VL-01" in minimax.model_ids()


def test_resolved_models_do_not_alias_catalog():
    providers = resolve_implicit_providers(EnvSnapshot({"SYNTHETIC_API_KEY": "x"}))
    providers["synthetic"].models[0].name = "changed"

    assert get_implicit_provider("synthetic").models[0].name != "changed"


def test_merge_adds_implicit_alongside_explicit():
    explicit = {"custom-proxy": ProviderConfig(base_url="http://localhost:4000/v1")}
    implicit = resolve_implicit_providers(EnvSnapshot({"SYNTHETIC_API_KEY": "x"}))

    merged = merge_providers(implicit, explicit)

    assert list(merged) == ["custom-proxy", "synthetic"]
    assert merged["custom-proxy"].base_url == "http://localhost:4000/v1"


def test_merge_collision_prefers_explicit_fields():
    explicit = {
        "synthetic": ProviderConfig(
            base_url="https://mirror.example.com/anthropic",
            models=[ModelDefinition(id="custom-model")],
        )
    }
    implicit = resolve_implicit_providers(EnvSnapshot({"SYNTHETIC_API_KEY": "x"}))

    merged = merge_providers(implicit, explicit)["synthetic"]

    assert merged.base_url == "https://mirror.example.com/anthropic"
    assert merged.api_key == "SYNTHETIC_API_KEY"
    assert merged.model_ids()[0] == "custom-model"
    assert "hf:MiniMaxAI/MiniMax-M2.1" in merged.model_ids()


def test_merge_keeps_explicit_extra_fields():
    explicit = {"minimax": ProviderConfig.model_validate({"baseUrl": "https://x", "region": "eu"})}
    implicit = resolve_implicit_providers(EnvSnapshot({"MINIMAX_API_KEY": "x"}))

    merged = merge_providers(implicit, explicit)["minimax"]

    assert merged.to_json_dict()["region"] == "eu"


def test_normalize_reduces_env_reference_syntax():
    providers = {"proxy": ProviderConfig(base_url="http://p", api_key="${PROXY_TOKEN}")}

    normalized = normalize_providers(providers, EnvSnapshot({}))

    assert normalized["proxy"].api_key == "PROXY_TOKEN"


def test_normalize_replaces_literal_secret():
    providers = {"proxy": ProviderConfig(base_url="http://p", api_key="sk-secret")}

    normalized = normalize_providers(providers, EnvSnapshot({"VENICE_API_KEY": "sk-secret"}))

    assert normalized["proxy"].api_key == "VENICE_API_KEY"


def test_normalize_fills_missing_key_for_implicit_provider():
    providers = {"moonshot": ProviderConfig(models=[ModelDefinition(id="kimi-k2.5")])}

    normalized = normalize_providers(providers, EnvSnapshot({"MOONSHOT_API_KEY": "x"}))

    assert normalized["moonshot"].api_key == "MOONSHOT_API_KEY"


def test_normalize_leaves_unrelated_keys_alone():
    providers = {"proxy": ProviderConfig(base_url="http://p", api_key="TEST_KEY")}

    normalized = normalize_providers(providers, EnvSnapshot({"MINIMAX_API_KEY": "sk"}))

    assert normalized["proxy"] is providers["proxy"]


def test_normalize_warns_about_key_that_is_not_an_env_name(caplog):
    providers = {"proxy": ProviderConfig(base_url="http://p", api_key="sk-live-abc123")}

    with caplog.at_level(logging.WARNING, logger="openclaw_models.providers.implicit"):
        normalized = normalize_providers(providers, EnvSnapshot({}))

    assert normalized["proxy"].api_key == "sk-live-abc123"
    assert "apiKey for provider proxy is not an env var name" in caplog.text


def test_normalize_does_not_warn_for_env_names(caplog):
    providers = {"proxy": ProviderConfig(base_url="http://p", api_key="${PROXY_TOKEN}")}

    with caplog.at_level(logging.WARNING, logger="openclaw_models.providers.implicit"):
        normalize_providers(providers, EnvSnapshot({}))

    assert caplog.records == []


def test_default_local_provider_is_ollama():
    provider = build_default_local_provider()

    assert provider.api == "ollama"
    assert provider.api_key is None
    assert provider.to_json_dict() == {
        "baseUrl": "http://127.0.0.1:11434",
        "api": "ollama",
        "models": [],
    }
