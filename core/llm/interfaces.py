"""
LLM Provider Interface - Abstract base for chat completion providers.

This module defines the interface for completion services (Groq, OpenAI,
Ollama or any other OpenAI-compatible endpoint).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Literal, Optional, TypedDict

Role = Literal["system", "user", "assistant"]


class Message(TypedDict):
    role: Role
    content: str


@dataclass(frozen=True)
class CompletionOptions:
    """Options for a single completion call.

    ``stream`` is part of the option set for completeness but the service
    always sends ``stream=False``: callers need the full text to parse it.
    """
    model: Optional[str] = None  # None = provider default model
    temperature: float = 0.7
    max_tokens: int = 1024
    top_p: float = 1.0
    stream: bool = False

    def __post_init__(self):
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"temperature must be within [0, 1], got {self.temperature}")
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")


class LLMProvider(ABC):
    """
    Abstract Interface for chat completion providers.
    """

    @abstractmethod
    def complete(self, messages: List[Message], options: Optional[CompletionOptions] = None) -> str:
        """
        Run one chat completion and return the text of the top choice.

        Returns an empty string when the provider returns no choices.

        Raises:
            ConfigurationError: no usable credential is available.
            UpstreamError: the remote call failed or timed out.
        """
        pass

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether a credential is available, without initialising a client."""
        pass
