"""
Model clients for the guessing game.

Every client exposes the same narrow interface, `send(prompt, history) -> str`,
and wraps provider failures in TransportError:
- OpenAI (GPT-4o, etc.) via official SDK
- Anthropic (Claude) via official SDK
- Google (Gemini) via official SDK
- OSS models (Llama, Qwen, Mixtral) via Together AI
- Local models via vLLM/Ollama

Usage:
    from guessr.models import get_client_for_model

    client = get_client_for_model("gemini", temperature=0.7)
    raw = client.send('Reply with {"ok": true}')
"""

from .base_client import ChatClient, ChatMessage
from .openai_client import OpenAIClient
from .anthropic_client import AnthropicClient
from .gemini_client import GeminiClient
from .oss_client import OSSClient, LocalClient
from .client_factory import (
    get_client_for_model,
    resolve_model,
    MODEL_PRESETS,
)

__all__ = [
    # Main functions
    "get_client_for_model",
    "resolve_model",

    # Client classes
    "OpenAIClient",
    "AnthropicClient",
    "GeminiClient",
    "OSSClient",
    "LocalClient",

    # Base types
    "ChatClient",
    "ChatMessage",

    # Constants
    "MODEL_PRESETS",
]
