from __future__ import annotations
import os
from typing import Sequence

import google.generativeai as genai

from ..errors import TransportError
from ..prompts import SYSTEM_PROMPT
from .base_client import ChatMessage, provider_error


class GeminiClient:
    """Client for Google Gemini models using official SDK."""

    def __init__(
        self,
        model: str = "models/gemini-2.0-flash",
        api_key: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 512,
        timeout: float = 60.0,
    ):
        """
        Initialize Gemini client.

        Args:
            model: Gemini model name (e.g., "models/gemini-2.0-flash")
            api_key: Google API key (defaults to GOOGLE_API_KEY, then GEMINI_API_KEY)
            temperature: Sampling temperature
            max_tokens: Max response tokens
            timeout: Per-request timeout in seconds
        """
        api_key = api_key or os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise ValueError("GOOGLE_API_KEY not found in environment")
        genai.configure(api_key=api_key)

        self.model = model
        self.timeout = timeout
        self._model = genai.GenerativeModel(
            model_name=model,
            generation_config={
                "temperature": temperature,
                "max_output_tokens": max_tokens,
                "response_mime_type": "application/json",  # Request JSON output
            },
            system_instruction=SYSTEM_PROMPT,
        )

    def send(self, prompt: str, history: Sequence[ChatMessage] = ()) -> str:
        contents = [{"role": m.role, "parts": [m.content]} for m in history]
        contents.append({"role": "user", "parts": [prompt]})

        try:
            response = self._model.generate_content(
                contents,
                request_options={"timeout": self.timeout},
            )
            # .text raises ValueError when the candidate was blocked
            raw_text = response.text
        except Exception as e:
            raise provider_error(self.model, e) from e

        if not raw_text:
            raise TransportError(f"Empty response from {self.model}")
        return raw_text
