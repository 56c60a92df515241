"""
Provider Types and Data Models

Defines enums and Pydantic models for the models.json schema.

JSON keys are camelCase (baseUrl, apiKey, contextWindow); Python attributes
are snake_case and mapped through aliases.
"""
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ModelApi(str, Enum):
    """Well-known API protocol types; `api` fields also accept other names"""
    OPENAI_COMPLETIONS = "openai-completions"       # OpenAI chat completions and compatible
    OPENAI_RESPONSES = "openai-responses"           # OpenAI responses API
    ANTHROPIC_MESSAGES = "anthropic-messages"       # Anthropic messages API and compatible
    GOOGLE_GENERATIVE_AI = "google-generative-ai"   # Google Gemini API
    OLLAMA = "ollama"                               # Ollama local models


class ModelInput(str, Enum):
    """Input modalities a model accepts"""
    TEXT = "text"
    IMAGE = "image"


def _strip_api(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value:
        raise ValueError("api must not be empty")
    return value


class _SchemaModel(BaseModel):
    """Base for models.json entries: alias-aware, keeps unknown keys."""
    model_config = ConfigDict(
        populate_by_name=True,
        extra="allow",
        use_enum_values=True,
    )

    def to_json_dict(self) -> dict:
        """Serialize with camelCase keys, dropping unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ModelCost(_SchemaModel):
    """Per-million-token pricing"""
    input: float = 0.0
    output: float = 0.0
    cache_read: float = Field(default=0.0, alias="cacheRead")
    cache_write: float = Field(default=0.0, alias="cacheWrite")


class ModelDefinition(_SchemaModel):
    """A single model served by a provider."""
    id: str = Field(..., description="Model ID (e.g., MiniMax-M2.1)")
    name: Optional[str] = Field(default=None, description="Display name")
    api: Optional[str] = Field(default=None, description="Per-model API override")
    reasoning: Optional[bool] = Field(default=None, description="Supports thinking/reasoning mode")
    input: Optional[List[ModelInput]] = Field(default=None, description="Accepted input modalities")
    cost: Optional[ModelCost] = None
    context_window: Optional[int] = Field(default=None, alias="contextWindow", ge=1)
    max_tokens: Optional[int] = Field(default=None, alias="maxTokens", ge=1)

    @field_validator("id")
    @classmethod
    def _strip_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("model id must not be empty")
        return value

    @field_validator("api")
    @classmethod
    def _check_api(cls, value: Optional[str]) -> Optional[str]:
        return _strip_api(value)


class ProviderConfig(_SchemaModel):
    """
    Provider entry in models.json.

    api_key holds the *name* of an environment variable, not the secret itself.
    """
    base_url: Optional[str] = Field(default=None, alias="baseUrl", description="API base URL")
    api_key: Optional[str] = Field(default=None, alias="apiKey", description="Env var holding the API key")
    api: Optional[str] = Field(default=None, description="API protocol type (see ModelApi)")
    auth: Optional[str] = Field(default=None, description="Auth mode (api-key, oauth, token)")
    auth_header: Optional[bool] = Field(default=None, alias="authHeader")
    headers: Optional[Dict[str, str]] = None
    models: Optional[List[ModelDefinition]] = None

    @field_validator("api")
    @classmethod
    def _check_api(cls, value: Optional[str]) -> Optional[str]:
        return _strip_api(value)

    def model_ids(self) -> List[str]:
        return [model.id for model in self.models or []]


class ModelsConfig(BaseModel):
    """The `models` section of an OpenClaw config."""
    model_config = ConfigDict(extra="allow")

    mode: Literal["merge", "replace"] = Field(
        default="merge",
        description="merge keeps providers already in models.json; replace rewrites it",
    )
    providers: Dict[str, ProviderConfig] = Field(default_factory=dict)

    @field_validator("providers", mode="before")
    @classmethod
    def _normalize_provider_keys(cls, data):
        if not isinstance(data, dict):
            return data

        normalized = {}
        for raw_key, value in data.items():
            key = str(raw_key).strip()
            if not key:
                raise ValueError("provider key must not be empty")
            if key in normalized:
                raise ValueError(f"duplicate provider key '{key}'")
            normalized[key] = value
        return normalized


class OpenClawConfig(BaseModel):
    """
    Caller-supplied OpenClaw config.

    Only the `models` section is consulted; every other section passes through.
    """
    model_config = ConfigDict(extra="allow")

    models: Optional[ModelsConfig] = None

    @property
    def explicit_providers(self) -> Dict[str, ProviderConfig]:
        return dict(self.models.providers) if self.models else {}


class ModelsJsonFile(BaseModel):
    """Persisted shape of <agentDir>/models.json"""
    providers: Dict[str, ProviderConfig] = Field(default_factory=dict)

    def to_json_dict(self) -> dict:
        return {
            "providers": {
                key: provider.to_json_dict()
                for key, provider in self.providers.items()
            }
        }
