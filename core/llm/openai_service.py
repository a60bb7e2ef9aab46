"""
OpenAI Service - chat completions against an OpenAI-compatible API.

The underlying SDK client is created lazily on the first completion call, so
the application starts (and everything not touching the model keeps working)
without a credential configured.
"""
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import logging
import os
import threading

import openai
from openai import OpenAI

from core.errors import ConfigurationError, UpstreamError
from core.llm.interfaces import CompletionOptions, LLMProvider, Message

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama-3.3-70b-versatile"
DEFAULT_TIMEOUT_SECONDS = 30.0

CredentialResolver = Callable[[], Optional[str]]


class ClientState(str, Enum):
    """Lifecycle of the lazily built SDK client.

    UNINITIALIZED -> READY on the first call with a credential.
    UNINITIALIZED -> CONFIG_ERROR on the first call without one; terminal
    until ``reset()``.
    """
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    CONFIG_ERROR = "config_error"


def env_credential_resolver(env_var: str) -> CredentialResolver:
    """Build a resolver that reads the API key from an environment variable."""
    def _resolve() -> Optional[str]:
        return os.environ.get(env_var) or None
    return _resolve


class OpenAIService(LLMProvider):
    """
    OpenAI-compatible completion service.

    Sends one ``chat.completions.create`` call per ``complete()`` and returns
    the first choice's text. The SDK's own retries are disabled.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_key_env: str = "GROQ_API_KEY",
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None,
        credential_resolver: Optional[CredentialResolver] = None,
        client_factory: Callable[..., Any] = OpenAI,
    ):
        if credential_resolver is None:
            if api_key:
                credential_resolver = lambda: api_key
            else:
                credential_resolver = env_credential_resolver(api_key_env)

        self._resolve_credential = credential_resolver
        self._client_factory = client_factory
        self._credential_name = api_key_env
        self.base_url = base_url

        self.model_config = model_config or {}
        self.model = self.model_config.get('model', DEFAULT_MODEL)
        self.timeout_seconds = self.model_config.get('timeout_seconds', DEFAULT_TIMEOUT_SECONDS)

        self._client = None
        self._state = ClientState.UNINITIALIZED
        self._init_lock = threading.Lock()

    @property
    def state(self) -> ClientState:
        return self._state

    @property
    def is_configured(self) -> bool:
        if self._state == ClientState.READY:
            return True
        return bool(self._resolve_credential())

    def reset(self) -> None:
        """Drop the client so the credential is resolved again on next use."""
        with self._init_lock:
            self._client = None
            self._state = ClientState.UNINITIALIZED

    def _get_client(self):
        if self._state == ClientState.READY:
            return self._client

        with self._init_lock:
            if self._state == ClientState.READY:
                return self._client
            if self._state == ClientState.CONFIG_ERROR:
                raise ConfigurationError(f"{self._credential_name} is not configured")

            api_key = self._resolve_credential()
            if not api_key:
                self._state = ClientState.CONFIG_ERROR
                logger.error(f"No API credential found ({self._credential_name}); AI features are unavailable")
                raise ConfigurationError(f"{self._credential_name} is not configured")

            client_kwargs = {
                'api_key': api_key,
                'timeout': self.timeout_seconds,
                'max_retries': 0,
            }
            if self.base_url:
                client_kwargs['base_url'] = self.base_url

            self._client = self._client_factory(**client_kwargs)
            self._state = ClientState.READY
            logger.info(f"Completion client initialised (model={self.model}, base_url={self.base_url or 'default'})")
            return self._client

    def complete(self, messages: List[Message], options: Optional[CompletionOptions] = None) -> str:
        """Run one chat completion.

        Args:
            messages: Role-tagged messages, system message first.
            options: Sampling options; defaults apply when omitted.

        Returns:
            Text of the first choice, or "" when no choice came back.
        """
        client = self._get_client()
        options = options or CompletionOptions()

        try:
            response = client.chat.completions.create(
                messages=list(messages),
                model=options.model or self.model,
                temperature=options.temperature,
                max_tokens=options.max_tokens,
                top_p=options.top_p,
                stream=False,
            )
        except openai.APITimeoutError as e:
            logger.error(f"Completion timed out after {self.timeout_seconds}s")
            raise UpstreamError(f"Completion timed out after {self.timeout_seconds}s") from e
        except openai.APIError as e:
            logger.error(f"Completion failed: {e.__class__.__name__}: {e}")
            raise UpstreamError(f"Completion failed: {e}") from e

        choices = getattr(response, 'choices', None) or []
        if not choices:
            logger.warning("Completion returned no choices")
            return ""

        message = getattr(choices[0], 'message', None)
        content = getattr(message, 'content', None) if message is not None else None
        return content or ""
