#!/usr/bin/env python3
"""
AI endpoints - recommendations, skill analysis, text tools and the assistant chat.
"""

import uuid
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from core.ai.assistant import AIAssistant
from ..config import get_config
from ..dependencies import get_ai_feature_service, get_assistant
from ..services.ai_service import AIFeatureService
from ..models.requests import (
    JobRecommendationRequest,
    WorkerRecommendationRequest,
    SkillGapRequest,
    SkillRecommendationRequest,
    EnhanceTextRequest,
    SearchEnhanceRequest,
    InterviewQuestionsRequest,
    SalaryEstimateRequest,
    ChatRequest,
)
from ..models.responses import (
    DataResponse,
    MessageResponse,
    WorkerMatchesResponse,
    EnhancedTextResponse,
    SearchSuggestionsResponse,
    ChatReplyResponse,
    AIHealthResponse,
)

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

router = APIRouter(prefix="/api/ai", tags=["ai"])

FEATURES = [
    "Job Recommendations",
    "Worker Matching",
    "Skill Gap Analysis",
    "Text Enhancement",
    "Search Enhancement",
    "Salary Estimation",
    "Interview Questions",
    "Conversational AI",
]


def ai_rate_limit() -> str:
    """Per-client limit for AI endpoints; each call is a metered completion."""
    return get_config().rate_limit.ai_requests


def add_rate_limit_handlers(app):
    """Add rate limit exception handlers to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"success": False, "error": str(exc), "type": "RateLimitExceeded"}
    )


def new_conversation_id() -> str:
    return f"chat-{uuid.uuid4().hex}"


@router.get("/health", response_model=AIHealthResponse)
def get_health(assistant: AIAssistant = Depends(get_assistant)):
    """
    Report whether the AI provider is configured and which features exist.

    Does not call the provider.
    """
    llm_config = get_config().llm
    return AIHealthResponse(data={
        "configured": assistant.llm.is_configured,
        "model": llm_config.model,
        "provider": llm_config.provider,
        "features": FEATURES,
    })


@router.post("/recommendations/jobs", response_model=DataResponse)
@limiter.limit(ai_rate_limit)
def get_job_recommendations(
    request: Request,
    body: JobRecommendationRequest,
    service: AIFeatureService = Depends(get_ai_feature_service)
):
    """
    Recommend job types for a stored worker profile.
    """
    return DataResponse(data=service.recommend_jobs(body.worker_id))


@router.post("/recommendations/workers", response_model=WorkerMatchesResponse)
@limiter.limit(ai_rate_limit)
def get_worker_recommendations(
    request: Request,
    body: WorkerRecommendationRequest,
    service: AIFeatureService = Depends(get_ai_feature_service)
):
    """
    Rank available workers for a stored job.

    Matches whose workerIndex does not point at a candidate are dropped;
    droppedMatches reports how many.
    """
    return WorkerMatchesResponse(data=service.recommend_workers(body.job_id, body.max_results))


@router.post("/skills/gap-analysis", response_model=DataResponse)
@limiter.limit(ai_rate_limit)
def analyze_skill_gap(
    request: Request,
    body: SkillGapRequest,
    service: AIFeatureService = Depends(get_ai_feature_service)
):
    """
    Compare current skills against a target profession.
    """
    analysis = service.run(
        service.assistant.analyze_skill_gap,
        body.current_skills,
        body.target_profession,
    )
    return DataResponse(data=analysis)


@router.post("/skills/recommendations", response_model=DataResponse)
@limiter.limit(ai_rate_limit)
def get_skill_recommendations(
    request: Request,
    body: SkillRecommendationRequest,
    service: AIFeatureService = Depends(get_ai_feature_service)
):
    """
    Recommend skills to learn for a profession.
    """
    data = service.run(service.assistant.recommend_skills, body.profession, body.current_skills)
    return DataResponse(data=data)


@router.post("/enhance", response_model=EnhancedTextResponse)
@limiter.limit(ai_rate_limit)
def enhance_text(
    request: Request,
    body: EnhanceTextRequest,
    service: AIFeatureService = Depends(get_ai_feature_service)
):
    """
    Rewrite a job description, bio, title, cover letter or company description.
    """
    enhanced = service.run(service.assistant.enhance_text, body.text, body.text_type)
    return EnhancedTextResponse(data={"original": body.text, "enhanced": enhanced})


@router.post("/search/enhance", response_model=SearchSuggestionsResponse)
@limiter.limit(ai_rate_limit)
def enhance_search(
    request: Request,
    body: SearchEnhanceRequest,
    service: AIFeatureService = Depends(get_ai_feature_service)
):
    """
    Suggest up to three alternative search terms.
    """
    suggestions = service.run(service.assistant.enhance_search_query, body.query, body.search_type)
    return SearchSuggestionsResponse(data={"original_query": body.query, "suggestions": suggestions})


@router.post("/interview/questions", response_model=DataResponse)
@limiter.limit(ai_rate_limit)
def generate_interview_questions(
    request: Request,
    body: InterviewQuestionsRequest,
    service: AIFeatureService = Depends(get_ai_feature_service)
):
    """
    Generate interview questions for a role.
    """
    questions = service.run(
        service.assistant.generate_interview_questions,
        body.job_title,
        body.skills,
        body.experience_level,
    )
    return DataResponse(data=questions)


@router.post("/salary/estimate", response_model=DataResponse)
@limiter.limit(ai_rate_limit)
def estimate_salary(
    request: Request,
    body: SalaryEstimateRequest,
    service: AIFeatureService = Depends(get_ai_feature_service)
):
    """
    Estimate hourly and monthly pay for a profession.
    """
    estimation = service.run(
        service.assistant.estimate_salary,
        body.profession,
        body.skills,
        body.experience,
        body.location,
    )
    return DataResponse(data=estimation)


@router.post("/chat", response_model=ChatReplyResponse)
@limiter.limit(ai_rate_limit)
def chat(
    request: Request,
    body: ChatRequest,
    service: AIFeatureService = Depends(get_ai_feature_service)
):
    """
    Send one message to the platform assistant.

    Omit conversationId to start a new conversation; reuse the returned one
    to continue it.
    """
    conversation_id = body.conversation_id or new_conversation_id()
    reply = service.run(service.assistant.chat, body.message, conversation_id, body.role or "worker")
    return ChatReplyResponse(data={"message": reply, "conversation_id": conversation_id})


@router.delete("/chat/{conversation_id}", response_model=MessageResponse)
def clear_conversation(
    conversation_id: str,
    assistant: AIAssistant = Depends(get_assistant)
):
    """
    Forget a conversation. Unknown IDs succeed too.
    """
    assistant.clear_conversation(conversation_id)
    return MessageResponse(message="Conversation cleared successfully")
