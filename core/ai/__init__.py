"""AI Module - prompt building, response extraction and the assistant features."""
from core.ai.assistant import AIAssistant, CAPABILITY_OPTIONS
from core.ai.conversation_store import ConversationStore
from core.ai.extraction import FALLBACKS, extract_json, extract_structured
from core.ai.models import Capability, JobPosting, JobRequirements, PromptPair, WorkerProfile
from core.ai.prompts import build_prompt

__all__ = [
    'AIAssistant',
    'CAPABILITY_OPTIONS',
    'ConversationStore',
    'FALLBACKS',
    'extract_json',
    'extract_structured',
    'Capability',
    'JobPosting',
    'JobRequirements',
    'PromptPair',
    'WorkerProfile',
    'build_prompt',
]
