#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DataResponse(BaseModel):
    """Successful response wrapping a feature result."""
    success: bool = True
    data: Any


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class WorkerMatch(CamelModel):
    """An AI match joined back to the stored worker record."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    worker_index: int
    match_score: Optional[int] = Field(None, ge=0, le=100)
    strengths: Any = Field(default_factory=list)
    concerns: Any = Field(default_factory=list)
    recommendation: Optional[str] = None
    worker: Dict[str, Any]


class WorkerMatchesData(CamelModel):
    matches: List[WorkerMatch]
    hiring_advice: Any = ""
    total_analyzed: int
    dropped_matches: int = 0


class WorkerMatchesResponse(BaseModel):
    success: bool = True
    data: WorkerMatchesData


class EnhancedTextData(CamelModel):
    original: str
    enhanced: str


class EnhancedTextResponse(BaseModel):
    success: bool = True
    data: EnhancedTextData


class SearchSuggestionsData(CamelModel):
    original_query: str
    suggestions: List[str]


class SearchSuggestionsResponse(BaseModel):
    success: bool = True
    data: SearchSuggestionsData


class ChatReplyData(CamelModel):
    message: str
    conversation_id: str


class ChatReplyResponse(BaseModel):
    success: bool = True
    data: ChatReplyData


class AIHealthData(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "configured": True,
                "model": "llama-3.3-70b-versatile",
                "provider": "Groq",
                "features": ["Job Recommendations", "Conversational AI"]
            }
        }
    )

    configured: bool
    model: str
    provider: str
    features: List[str]


class AIHealthResponse(BaseModel):
    success: bool = True
    data: AIHealthData
