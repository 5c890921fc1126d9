from __future__ import annotations
import os

from .openai_client import OpenAIClient


class OSSClient(OpenAIClient):
    """
    Client for open-source models via Together AI.
    Uses OpenAI-compatible API for easy integration.
    """

    def __init__(
        self,
        model: str = "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
        api_key: str | None = None,
        base_url: str | None = None,
        **kwargs,
    ):
        """
        Initialize OSS model client.

        Args:
            model: Model identifier on Together AI
            api_key: Together API key (defaults to TOGETHER_API_KEY env var)
            base_url: API base URL (defaults to Together AI)
            **kwargs: temperature, max_tokens, timeout
        """
        kwargs.setdefault("json_mode", False)
        super().__init__(
            model=model,
            api_key=api_key or os.getenv("TOGETHER_API_KEY"),
            base_url=base_url or "https://api.together.xyz/v1",
            **kwargs,
        )


class LocalClient(OpenAIClient):
    """
    Client for locally-hosted models (e.g., vLLM, Ollama).
    Uses OpenAI-compatible API.
    """

    def __init__(self, model: str, base_url: str = "http://localhost:8000/v1", **kwargs):
        """
        Initialize local model client.

        Args:
            model: Model identifier (depends on what's loaded locally)
            base_url: Local server URL (defaults to vLLM default)
            **kwargs: temperature, max_tokens, timeout
        """
        kwargs.setdefault("json_mode", False)
        super().__init__(
            model=model,
            api_key="EMPTY",  # Local servers don't need real keys
            base_url=base_url,
            **kwargs,
        )
