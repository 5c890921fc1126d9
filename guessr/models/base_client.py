from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Literal, Protocol, Sequence

from ..errors import TransportError


@dataclass(frozen=True)
class ChatMessage:
    """One prior turn of the conversation, replayed to the model as context."""
    role: Literal["user", "model"]
    content: str


class ChatClient(Protocol):
    """Protocol defining the interface all model clients must implement."""

    model: str

    def send(self, prompt: str, history: Sequence[ChatMessage] = ()) -> str:
        """
        Send one prompt to the model.

        Args:
            prompt: The instruction for this turn
            history: Earlier turns, oldest first

        Returns:
            Raw reply text. Untrusted: callers must validate it.

        Raises:
            TransportError: If the provider call fails or times out
        """
        ...


def provider_error(model: str, e: Exception) -> TransportError:
    """Wrap a provider SDK exception with the most useful detail available."""
    detail = getattr(e, "message", None) or getattr(e, "body", None) or str(e)
    return TransportError(f"Provider error calling {model}: {detail}")


def to_role_messages(history: Sequence[ChatMessage], model_role: str = "assistant") -> List[Dict[str, str]]:
    """Map history onto the user/assistant message dicts used by chat APIs."""
    return [
        {"role": model_role if m.role == "model" else "user", "content": m.content}
        for m in history
    ]
