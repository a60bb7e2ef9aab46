"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest
from sqlalchemy.orm import sessionmaker

from core.ai.assistant import AIAssistant
from core.ai.conversation_store import ConversationStore
from core.llm.system_prompts import ROLEPLAY_PERSONAS
from tests import create_test_engine
from tests.mocks.llm_mocks import ScriptedLLMProvider


@pytest.fixture
def llm():
    """Scripted provider returning an empty reply until a test scripts one."""
    return ScriptedLLMProvider()


@pytest.fixture
def assistant(llm):
    """Assistant with small, isolated conversation stores."""
    return AIAssistant(
        llm,
        conversations=ConversationStore(max_entries=5, max_history=6),
        roleplay_conversations=ConversationStore(max_entries=5, max_history=6, personas=ROLEPLAY_PERSONAS),
    )


@pytest.fixture
def session_factory():
    engine = create_test_engine()
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
