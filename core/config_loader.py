import yaml
import os
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class LlmConfig(BaseModel):
    # Any OpenAI-compatible chat completion endpoint works; Groq by default
    base_url: Optional[str] = "https://api.groq.com/openai/v1"
    api_key: Optional[str] = None  # Literal key; prefer api_key_env
    api_key_env: str = "GROQ_API_KEY"  # Resolved lazily on first completion
    provider: str = "Groq"
    model: str = "llama-3.3-70b-versatile"
    timeout_seconds: float = 30.0
    # Transport-level single retry on upstream failure. The core never retries.
    retry_upstream_once: bool = False


class ConversationConfig(BaseModel):
    """Bounds for the in-memory conversation stores."""
    max_entries: int = Field(default=1000, ge=1)
    max_history: int = Field(default=20, ge=2)


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///./skillconnect.db"


class WebConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class RateLimitConfig(BaseModel):
    ai_requests: str = "30/minute"  # slowapi limit string for AI endpoints


class AppConfig(BaseModel):
    llm: LlmConfig = Field(default_factory=LlmConfig)
    conversations: ConversationConfig = Field(default_factory=ConversationConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    if name not in data or data[name] is None:
        data[name] = {}
    return data[name]


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to raw configuration."""
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        _section(data, 'database')['url'] = env_db_url

    env_web_host = os.environ.get("WEB_HOST")
    if env_web_host:
        _section(data, 'web')['host'] = env_web_host

    env_web_port = os.environ.get("WEB_PORT")
    if env_web_port:
        _section(data, 'web')['port'] = int(env_web_port)

    env_llm_base_url = os.environ.get("LLM_BASE_URL")
    if env_llm_base_url:
        _section(data, 'llm')['base_url'] = env_llm_base_url

    env_llm_model = os.environ.get("LLM_MODEL")
    if env_llm_model:
        _section(data, 'llm')['model'] = env_llm_model

    return data


def load_config(config_path: str = "config.yaml") -> AppConfig:
    """Load configuration from YAML, falling back to defaults when no file exists.

    API credentials are not read here; the completion client
    resolves them on first use so the rest of the app runs unconfigured.
    """
    if not os.path.exists(config_path):
        # Docker fallback: WORKDIR is /app and config is in /app/config.yaml
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    # Empty sections ("llm:" with nothing under it) load as None
    data = {key: value for key, value in data.items() if value is not None}
    data = _apply_env_overrides(data)
    return AppConfig(**data)
