from dataclasses import dataclass

from core.ai.assistant import AIAssistant
from core.ai.conversation_store import ConversationStore
from core.config_loader import AppConfig, ConversationConfig, LlmConfig
from core.llm.openai_service import OpenAIService
from core.llm.system_prompts import ASSISTANT_PERSONAS, ROLEPLAY_PERSONAS


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Building the context never touches the network or reads the API key;
    the completion client resolves its credential on first use.
    """
    config: AppConfig
    ai_service: OpenAIService
    assistant: AIAssistant

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance
        """
        ai_service = cls._build_ai_service(config.llm)
        assistant = AIAssistant(
            ai_service,
            conversations=cls._build_conversation_store(config.conversations, ASSISTANT_PERSONAS),
            roleplay_conversations=cls._build_conversation_store(config.conversations, ROLEPLAY_PERSONAS),
        )
        return cls(config=config, ai_service=ai_service, assistant=assistant)

    @staticmethod
    def _build_ai_service(llm_config: LlmConfig) -> OpenAIService:
        """Build the completion service from LLM configuration."""
        model_config = {
            'model': llm_config.model,
            'timeout_seconds': llm_config.timeout_seconds,
        }

        return OpenAIService(
            api_key=llm_config.api_key,
            api_key_env=llm_config.api_key_env,
            base_url=llm_config.base_url,
            model_config=model_config,
        )

    @staticmethod
    def _build_conversation_store(conversation_config: ConversationConfig, personas) -> ConversationStore:
        return ConversationStore(
            max_entries=conversation_config.max_entries,
            max_history=conversation_config.max_history,
            personas=personas,
        )
