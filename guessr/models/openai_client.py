from __future__ import annotations
import os
from typing import Sequence

from openai import OpenAI

from ..errors import TransportError
from ..prompts import SYSTEM_PROMPT
from .base_client import ChatMessage, provider_error, to_role_messages


class OpenAIClient:
    """Client for OpenAI models using official SDK."""

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: str | None = None,
        base_url: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 512,
        timeout: float = 60.0,
        json_mode: bool = True,
    ):
        """
        Initialize OpenAI client.

        Args:
            model: OpenAI model name (e.g., "gpt-4o", "gpt-4o-mini")
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            base_url: Alternate OpenAI-compatible endpoint
            temperature: Sampling temperature
            max_tokens: Max response tokens
            timeout: Per-request timeout in seconds
            json_mode: Request `response_format={"type": "json_object"}`
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.json_mode = json_mode
        self.client = OpenAI(
            api_key=api_key or os.getenv("OPENAI_API_KEY"),
            base_url=base_url,
            timeout=timeout,
            max_retries=0,  # retries are owned by the game session
        )

    def send(self, prompt: str, history: Sequence[ChatMessage] = ()) -> str:
        messages = [{"role": "system", "content": SYSTEM_PROMPT}]
        messages += to_role_messages(history)
        messages.append({"role": "user", "content": prompt})

        kwargs = {}
        if self.json_mode:
            kwargs["response_format"] = {"type": "json_object"}  # Force JSON mode

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                **kwargs,
            )
        except Exception as e:
            raise provider_error(self.model, e) from e

        raw_text = response.choices[0].message.content if response.choices else None
        if not raw_text:
            raise TransportError(f"Empty response from {self.model}")
        return raw_text
