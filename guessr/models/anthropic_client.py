from __future__ import annotations
import os
from typing import Sequence

from anthropic import Anthropic

from ..errors import TransportError
from ..prompts import SYSTEM_PROMPT
from .base_client import ChatMessage, provider_error, to_role_messages


class AnthropicClient:
    """Client for Anthropic Claude models using official SDK."""

    def __init__(
        self,
        model: str = "claude-3-5-sonnet-20241022",
        api_key: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 512,
        timeout: float = 60.0,
    ):
        """
        Initialize Anthropic client.

        Args:
            model: Claude model name
            api_key: Anthropic API key (defaults to ANTHROPIC_API_KEY env var)
            temperature: Sampling temperature
            max_tokens: Max response tokens
            timeout: Per-request timeout in seconds
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.client = Anthropic(
            api_key=api_key or os.getenv("ANTHROPIC_API_KEY"),
            timeout=timeout,
            max_retries=0,
        )

    def send(self, prompt: str, history: Sequence[ChatMessage] = ()) -> str:
        messages = to_role_messages(history)
        messages.append({"role": "user", "content": prompt})

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SYSTEM_PROMPT,
                messages=messages,
            )
        except Exception as e:
            raise provider_error(self.model, e) from e

        # Claude may return several blocks; only text blocks carry the JSON
        raw_text = "".join(
            getattr(block, "text", "") for block in (response.content or [])
        )
        if not raw_text:
            raise TransportError(f"Empty response from {self.model}")
        return raw_text
