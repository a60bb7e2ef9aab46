"""Plain data objects passed into the AI feature operations.

Records are converted to these outside the database session, so the
feature layer never sees ORM objects or request models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Union

SkillList = Union[List[str], str]


class Capability(str, Enum):
    """Named AI features, each with its own prompt template and output shape."""
    JOB_RECOMMENDATION = "job_recommendation"
    WORKER_RECOMMENDATION = "worker_recommendation"
    SKILL_GAP = "skill_gap"
    ENHANCE_TEXT = "enhance_text"
    SEARCH_ENHANCEMENT = "search_enhancement"
    INTERVIEW_QUESTIONS = "interview_questions"
    SALARY_ESTIMATE = "salary_estimate"
    CHAT = "chat"
    ROLEPLAY_CHAT = "roleplay_chat"


@dataclass
class WorkerProfile:
    """Worker profile as read from the worker store. Never mutated here."""
    profession: Optional[str] = None
    skills: SkillList = field(default_factory=list)
    experience: Optional[int] = 0
    location: Optional[str] = None  # city
    preferences: List[str] = field(default_factory=list)  # preferred job types
    hourly_rate: Optional[float] = None
    rating: Optional[float] = None


@dataclass
class JobRequirements:
    experience: Optional[int] = 0
    education: Optional[str] = None


@dataclass
class JobPosting:
    """Job posting as read from the job store. Never mutated here."""
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    skills: SkillList = field(default_factory=list)
    requirements: JobRequirements = field(default_factory=JobRequirements)
    location: Optional[str] = None  # city


@dataclass
class PromptPair:
    """System and user messages for a one-shot completion."""
    system: str
    user: str

    def as_messages(self) -> List[dict]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


def is_blank(value: Any) -> bool:
    """A required value is missing when it is None or an empty/whitespace string."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()
