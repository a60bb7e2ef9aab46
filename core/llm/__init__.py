"""LLM Module - completion services and interfaces."""
from core.llm.interfaces import CompletionOptions, LLMProvider, Message
from core.llm.openai_service import ClientState, OpenAIService

__all__ = ['CompletionOptions', 'LLMProvider', 'Message', 'ClientState', 'OpenAIService']
