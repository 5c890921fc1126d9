from __future__ import annotations
from typing import Dict

from .base_client import ChatClient
from .openai_client import OpenAIClient
from .anthropic_client import AnthropicClient
from .gemini_client import GeminiClient
from .oss_client import OSSClient, LocalClient


# Model presets for convenience
MODEL_PRESETS: Dict[str, str] = {
    # OpenAI models
    "gpt4o": "gpt-4o",
    "gpt4o-mini": "gpt-4o-mini",

    # Anthropic models (use dated versions for reliability)
    "sonnet": "claude-3-5-sonnet-20241022",
    "haiku": "claude-3-5-haiku-20241022",

    # Google models
    "gemini": "models/gemini-2.0-flash",
    "gemini-flash": "models/gemini-2.5-flash",
    "gemini-pro": "models/gemini-2.5-pro",

    # OSS models via Together AI
    "llama-70b": "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
    "qwen-72b": "Qwen/Qwen2.5-72B-Instruct-Turbo",
    "mixtral-8x7b": "mistralai/Mixtral-8x7B-Instruct-v0.1",
}


def resolve_model(model: str) -> str:
    """Resolve a preset alias to the provider's model name."""
    return MODEL_PRESETS.get(model, model)


def get_client_for_model(model: str, **kwargs) -> ChatClient:
    """
    Factory function to get the appropriate client for a model.

    Args:
        model: Model identifier (can be preset name or full model string)
        **kwargs: temperature, max_tokens, timeout passed to the client

    Returns:
        Client instance bound to the resolved model

    Raises:
        ValueError: If model type cannot be determined
    """
    resolved_model = resolve_model(model)
    lowered = resolved_model.lower()

    if resolved_model.startswith("local/"):
        # For local models, strip the "local/" prefix
        return LocalClient(model=resolved_model[len("local/"):], **kwargs)

    if any(x in lowered for x in ["gpt", "o1", "o3"]):
        return OpenAIClient(model=resolved_model, **kwargs)

    if "claude" in lowered:
        return AnthropicClient(model=resolved_model, **kwargs)

    if "gemini" in lowered:
        return GeminiClient(model=resolved_model, **kwargs)

    if any(x in lowered for x in ["llama", "qwen", "mistral", "mixtral"]):
        return OSSClient(model=resolved_model, **kwargs)

    raise ValueError(
        f"Unknown model type: {model}\n"
        f"Supported: OpenAI (gpt-*), Anthropic (claude-*), "
        f"Google (gemini-*), OSS (llama, qwen, mistral), or local/* for local models"
    )
