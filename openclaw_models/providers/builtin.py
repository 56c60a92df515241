"""
Implicit Provider Definitions

Providers that are added to models.json automatically when their API-key
environment variable is set. Each entry pins the base URL, protocol and the
model catalog; only the variable name is ever written out.
"""
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .types import (
    ModelApi,
    ModelCost,
    ModelDefinition,
    ModelInput,
    ProviderConfig,
)


DEFAULT_LOCAL_PROVIDER_KEY = "ollama"
OLLAMA_BASE_URL = "http://127.0.0.1:11434"


class ImplicitProviderDefinition(BaseModel):
    """Env-triggered provider definition."""
    key: str = Field(..., description="Provider key in models.json")
    env_var: str = Field(..., description="Environment variable that enables the provider")
    api: ModelApi = Field(..., description="API protocol type")
    base_url: str = Field(..., description="Fixed API base URL")
    models: List[ModelDefinition] = Field(default_factory=list, description="Model catalog, in order")

    def to_provider_config(self) -> ProviderConfig:
        """Build the models.json entry; models are deep-copied."""
        return ProviderConfig(
            base_url=self.base_url,
            api_key=self.env_var,
            api=self.api.value,
            models=[model.model_copy(deep=True) for model in self.models],
        )


_TEXT = [ModelInput.TEXT]
_TEXT_IMAGE = [ModelInput.TEXT, ModelInput.IMAGE]
_FREE = ModelCost()


# Implicit provider definitions, keyed by provider key
IMPLICIT_PROVIDERS: Dict[str, ImplicitProviderDefinition] = {
    "minimax": ImplicitProviderDefinition(
        key="minimax",
        env_var="MINIMAX_API_KEY",
        api=ModelApi.ANTHROPIC_MESSAGES,
        base_url="https://api.minimax.io/anthropic",
        models=[
            ModelDefinition(
                id="MiniMax-M2.1",
                name="MiniMax M2.1",
                reasoning=False,
                input=_TEXT,
                cost=ModelCost(input=15, output=60, cache_read=2, cache_write=10),
                context_window=200000,
                max_tokens=8192,
            ),
            ModelDefinition(
                id="MiniMax-M2.1-lightning",
                name="MiniMax M2.1 Lightning",
                reasoning=False,
                input=_TEXT,
                cost=ModelCost(input=15, output=60, cache_read=2, cache_write=10),
                context_window=200000,
                max_tokens=8192,
            ),
            ModelDefinition(
                id="MiniMax-VL-01",
                name="MiniMax VL 01",
                reasoning=False,
                input=_TEXT_IMAGE,
                cost=ModelCost(input=15, output=60, cache_read=2, cache_write=10),
                context_window=200000,
                max_tokens=8192,
            ),
        ],
    ),

    "synthetic": ImplicitProviderDefinition(
        key="synthetic",
        env_var="SYNTHETIC_API_KEY",
        api=ModelApi.ANTHROPIC_MESSAGES,
        base_url="https://api.synthetic.new/anthropic",
        models=[
            ModelDefinition(
                id="hf:MiniMaxAI/MiniMax-M2.1",
                name="MiniMax M2.1",
                reasoning=False,
                input=_TEXT,
                cost=_FREE,
                context_window=192000,
                max_tokens=65536,
            ),
            ModelDefinition(
                id="hf:moonshotai/Kimi-K2-Thinking",
                name="Kimi K2 Thinking",
                reasoning=True,
                input=_TEXT,
                cost=_FREE,
                context_window=256000,
                max_tokens=8192,
            ),
            ModelDefinition(
                id="hf:zai-org/GLM-4.7",
                name="GLM-4.7",
                reasoning=False,
                input=_TEXT,
                cost=_FREE,
                context_window=198000,
                max_tokens=128000,
            ),
        ],
    ),

    "moonshot": ImplicitProviderDefinition(
        key="moonshot",
        env_var="MOONSHOT_API_KEY",
        api=ModelApi.OPENAI_COMPLETIONS,
        base_url="https://api.moonshot.ai/v1",
        models=[
            ModelDefinition(
                id="kimi-k2.5",
                name="Kimi K2.5",
                reasoning=False,
                input=_TEXT,
                cost=_FREE,
                context_window=128000,
                max_tokens=8192,
            ),
        ],
    ),

    "kimi-coding": ImplicitProviderDefinition(
        key="kimi-coding",
        env_var="KIMI_API_KEY",
        api=ModelApi.ANTHROPIC_MESSAGES,
        base_url="https://api.moonshot.ai/anthropic",
        models=[
            ModelDefinition(
                id="k2p5",
                name="Kimi K2P5",
                reasoning=True,
                input=_TEXT,
                cost=_FREE,
                context_window=128000,
                max_tokens=32768,
            ),
        ],
    ),

    "venice": ImplicitProviderDefinition(
        key="venice",
        env_var="VENICE_API_KEY",
        api=ModelApi.OPENAI_COMPLETIONS,
        base_url="https://api.venice.ai/api/v1",
        models=[
            ModelDefinition(
                id="llama-3.3-70b",
                name="Llama 3.3 70B",
                reasoning=False,
                input=_TEXT,
                cost=_FREE,
                context_window=128000,
                max_tokens=8192,
            ),
        ],
    ),

    "xiaomi": ImplicitProviderDefinition(
        key="xiaomi",
        env_var="XIAOMI_API_KEY",
        api=ModelApi.ANTHROPIC_MESSAGES,
        base_url="https://api.xiaomimimo.com/anthropic",
        models=[
            ModelDefinition(
                id="mimo-v2-flash",
                name="MiMo v2 Flash",
                reasoning=False,
                input=_TEXT,
                cost=_FREE,
                context_window=262144,
                max_tokens=8192,
            ),
        ],
    ),

    # Local models are discovered by the runtime, so no catalog is pinned here.
    "ollama": ImplicitProviderDefinition(
        key="ollama",
        env_var="OLLAMA_API_KEY",
        api=ModelApi.OLLAMA,
        base_url=OLLAMA_BASE_URL,
        models=[],
    ),
}


MODELS_CONFIG_IMPLICIT_ENV_VARS: Tuple[str, ...] = tuple(
    definition.env_var for definition in IMPLICIT_PROVIDERS.values()
)


def get_implicit_provider(provider_key: str) -> Optional[ImplicitProviderDefinition]:
    """
    Get an implicit provider definition by key.

    Args:
        provider_key: The provider key (e.g., "minimax")

    Returns:
        ImplicitProviderDefinition if found, None otherwise
    """
    return IMPLICIT_PROVIDERS.get(provider_key)


def get_all_implicit_providers() -> Dict[str, ImplicitProviderDefinition]:
    """Get all implicit provider definitions, in catalog order."""
    return IMPLICIT_PROVIDERS.copy()


def is_implicit_provider(provider_key: str) -> bool:
    return provider_key in IMPLICIT_PROVIDERS


def build_default_local_provider() -> ProviderConfig:
    """Provider written when nothing else is configured."""
    return ProviderConfig(
        base_url=OLLAMA_BASE_URL,
        api=ModelApi.OLLAMA.value,
        models=[],
    )
