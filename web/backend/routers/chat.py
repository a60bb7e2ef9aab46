#!/usr/bin/env python3
"""
Role-play chat endpoints - the assistant answers as the user's counterpart.
"""

import logging
from fastapi import APIRouter, Depends, Request

from core.ai.assistant import AIAssistant
from ..dependencies import get_ai_feature_service, get_assistant
from ..services.ai_service import AIFeatureService
from ..models.requests import ChatRequest
from ..models.responses import ChatReplyResponse, MessageResponse
from .ai import limiter, ai_rate_limit, new_conversation_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chat/ai", tags=["chat"])


@router.post("/message", response_model=ChatReplyResponse)
@limiter.limit(ai_rate_limit)
def send_ai_message(
    request: Request,
    body: ChatRequest,
    service: AIFeatureService = Depends(get_ai_feature_service)
):
    """
    Send a message and get the simulated counterpart's reply.

    Workers talk to a simulated employer; everyone else to a simulated worker.
    """
    conversation_id = body.conversation_id or new_conversation_id()
    reply = service.run(service.assistant.roleplay_chat, body.message, conversation_id, body.role)
    return ChatReplyResponse(data={"message": reply, "conversation_id": conversation_id})


@router.delete("/conversation/{conversation_id}", response_model=MessageResponse)
def clear_ai_conversation(
    conversation_id: str,
    assistant: AIAssistant = Depends(get_assistant)
):
    """
    Forget a role-play conversation.
    """
    assistant.clear_roleplay_conversation(conversation_id)
    return MessageResponse(message="Conversation cleared")
