#!/usr/bin/env python3
"""
Request models for API endpoints.

Field names are camelCase on the wire. Feature inputs are optional here so
that missing values reach the AI layer, which reports every missing field
in one 400 response.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Union

SkillsInput = Optional[Union[List[str], str]]


class CamelModel(BaseModel):
    """Base model accepting camelCase (wire) or snake_case names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JobRecommendationRequest(CamelModel):
    """Request job recommendations for a stored worker profile."""
    worker_id: Optional[str] = Field(None, description="Worker profile ID")


class WorkerRecommendationRequest(CamelModel):
    """Request ranked worker recommendations for a stored job."""
    job_id: Optional[str] = Field(None, description="Job ID")
    max_results: int = Field(default=10, ge=1, le=50, description="Maximum matches to return (1-50)")


class SkillGapRequest(CamelModel):
    current_skills: SkillsInput = Field(None, description="Skills the worker already has")
    target_profession: Optional[str] = Field(None, description="Profession to analyse the gap against")


class SkillRecommendationRequest(CamelModel):
    profession: Optional[str] = None
    current_skills: SkillsInput = Field(default_factory=list)


class EnhanceTextRequest(CamelModel):
    text: Optional[str] = Field(None, description="Text to enhance (at least 10 characters)")
    text_type: Optional[str] = Field(
        default="jobDescription",
        alias="type",
        description="jobDescription, workerBio, jobTitle, coverLetter or companyDescription"
    )


class SearchEnhanceRequest(CamelModel):
    query: Optional[str] = None
    search_type: Optional[str] = Field(default="job", alias="type", description="job or worker")


class InterviewQuestionsRequest(CamelModel):
    job_title: Optional[str] = None
    skills: SkillsInput = None
    experience_level: Optional[str] = Field(default="mid", description="entry, mid or senior")


class SalaryEstimateRequest(CamelModel):
    profession: Optional[str] = None
    skills: SkillsInput = None
    experience: Optional[int] = Field(default=0, ge=0)
    location: Optional[str] = "Kerala"


class ChatRequest(CamelModel):
    """A chat turn. A conversation ID is generated when none is given."""
    message: Optional[str] = None
    conversation_id: Optional[str] = None
    role: Optional[str] = Field(default="worker", description="worker, employer, admin or general")
