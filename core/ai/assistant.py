"""
AI Assistant - the AI-assisted matching and enrichment features.

Each one-shot feature validates its required inputs, builds a prompt, runs a
single completion and extracts a structured result. Unparseable model output
degrades to the feature's fallback; configuration and upstream errors from
the completion client propagate unchanged.
"""
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.ai.conversation_store import ConversationStore
from core.ai.extraction import extract_structured
from core.ai.models import Capability, JobPosting, SkillList, WorkerProfile, is_blank
from core.ai.prompts import (
    DEFAULT_EXPERIENCE_LEVEL,
    DEFAULT_LOCATION,
    DEFAULT_TEXT_TYPE,
    MAX_CANDIDATES_IN_PROMPT,
    build_prompt,
)
from core.errors import ValidationError
from core.llm.interfaces import CompletionOptions, LLMProvider, Message
from core.llm.system_prompts import ROLEPLAY_PERSONAS

logger = logging.getLogger(__name__)

MIN_ENHANCE_TEXT_LENGTH = 10
MAX_JOB_RECOMMENDATIONS = 5
MAX_SEARCH_SUGGESTIONS = 3
ROLEPLAY_EMPTY_REPLY = "Sorry, I could not generate a response."

MARKET_DEMAND_LEVELS = ("high", "medium", "low")
HIRING_DECISIONS = ("hire", "interview", "pass")

# Lower temperatures where ranking and numbers should be stable,
# higher ones for conversational and creative output.
CAPABILITY_OPTIONS: Dict[Capability, CompletionOptions] = {
    Capability.JOB_RECOMMENDATION: CompletionOptions(temperature=0.5, max_tokens=1500),
    Capability.WORKER_RECOMMENDATION: CompletionOptions(temperature=0.3, max_tokens=2000),
    Capability.SKILL_GAP: CompletionOptions(temperature=0.4, max_tokens=1500),
    Capability.ENHANCE_TEXT: CompletionOptions(temperature=0.7, max_tokens=500),
    Capability.SEARCH_ENHANCEMENT: CompletionOptions(temperature=0.6, max_tokens=200),
    Capability.INTERVIEW_QUESTIONS: CompletionOptions(temperature=0.6, max_tokens=1000),
    Capability.SALARY_ESTIMATE: CompletionOptions(temperature=0.3, max_tokens=500),
    Capability.CHAT: CompletionOptions(temperature=0.7, max_tokens=500),
    Capability.ROLEPLAY_CHAT: CompletionOptions(temperature=0.7, max_tokens=300),
}

_TEXT = (str,)
_SKILLS = (list, tuple, str)


def _validate(fields: Mapping[str, Tuple[Any, tuple]]) -> None:
    """Raise ValidationError naming every blank or mistyped required field."""
    invalid = [
        name for name, (value, types) in fields.items()
        if is_blank(value) or not isinstance(value, types)
    ]
    if invalid:
        raise ValidationError(invalid)


def normalize_score(value: Any) -> Optional[int]:
    """Coerce a 0-100 score the model may send as 85, 85.5, "85" or "85%"."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = re.search(r"-?\d+(?:\.\d+)?", value)
        if not match:
            return None
        number = float(match.group(0))
    else:
        return None
    return int(round(min(max(number, 0.0), 100.0)))


def _normalize_choice(value: Any, allowed: Sequence[str]) -> Optional[str]:
    if not isinstance(value, str):
        return None
    lowered = value.strip().lower()
    return lowered if lowered in allowed else None


class AIAssistant:
    """
    AI-assisted features over a single completion provider.

    Conversation state lives in the injected stores; everything else is
    local to each call.
    """

    def __init__(
        self,
        llm: LLMProvider,
        conversations: Optional[ConversationStore] = None,
        roleplay_conversations: Optional[ConversationStore] = None,
        options: Optional[Mapping[Capability, CompletionOptions]] = None,
    ):
        self.llm = llm
        self.conversations = conversations if conversations is not None else ConversationStore()
        self.roleplay_conversations = (
            roleplay_conversations if roleplay_conversations is not None
            else ConversationStore(personas=ROLEPLAY_PERSONAS)
        )
        self.options: Dict[Capability, CompletionOptions] = dict(CAPABILITY_OPTIONS)
        if options:
            self.options.update(options)

    def _complete(self, capability: Capability, messages: List[Message]) -> str:
        logger.debug(f"Running {capability.value} completion with {len(messages)} message(s)")
        return self.llm.complete(messages, self.options[capability])

    def _run(self, capability: Capability, structured_input: Mapping[str, Any]) -> Any:
        prompt = build_prompt(capability, structured_input)
        text = self._complete(capability, prompt.as_messages())
        return extract_structured(capability, text)

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def recommend_jobs_for_worker(self, profile: WorkerProfile) -> Dict[str, Any]:
        """Recommend job types for a worker.

        Returns:
            {"recommendations": [...], "skillGaps": [...], "careerAdvice": str}
            with at most five recommendations.
        """
        _validate({"profession": (getattr(profile, "profession", None), _TEXT)})

        result = self._run(Capability.JOB_RECOMMENDATION, {"profile": profile})

        recommendations = []
        for rec in result["recommendations"]:
            if not isinstance(rec, dict):
                continue
            rec["skillMatch"] = normalize_score(rec.get("skillMatch"))
            rec["marketDemand"] = _normalize_choice(rec.get("marketDemand"), MARKET_DEMAND_LEVELS)
            recommendations.append(rec)
        result["recommendations"] = recommendations[:MAX_JOB_RECOMMENDATIONS]
        return result

    def recommend_workers_for_job(
        self,
        job: JobPosting,
        candidates: Sequence[WorkerProfile] = (),
    ) -> Dict[str, Any]:
        """Rank pre-filtered candidates for a job.

        Only the first 20 candidates are shown to the model. ``workerIndex``
        values in the result are untrusted; the caller joins them back to
        its candidate list with bounds checks.
        """
        _validate({
            "title": (getattr(job, "title", None), _TEXT),
            "category": (getattr(job, "category", None), _TEXT),
        })

        shown = list(candidates)[:MAX_CANDIDATES_IN_PROMPT]
        result = self._run(Capability.WORKER_RECOMMENDATION, {"job": job, "candidates": shown})

        matches = []
        for match in result["topMatches"]:
            if not isinstance(match, dict):
                continue
            match["matchScore"] = normalize_score(match.get("matchScore"))
            match["recommendation"] = _normalize_choice(match.get("recommendation"), HIRING_DECISIONS)
            matches.append(match)
        result["topMatches"] = matches
        return result

    # ------------------------------------------------------------------
    # Skills
    # ------------------------------------------------------------------

    def analyze_skill_gap(self, current_skills: SkillList, target_profession: str) -> Dict[str, Any]:
        _validate({
            "currentSkills": (current_skills, _SKILLS),
            "targetProfession": (target_profession, _TEXT),
        })
        return self._run(Capability.SKILL_GAP, {
            "current_skills": current_skills,
            "target_profession": target_profession,
        })

    def recommend_skills(self, profession: str, current_skills: Optional[SkillList] = None) -> Dict[str, Any]:
        """Skill recommendations for a profession, derived from a gap analysis."""
        _validate({"profession": (profession, _TEXT)})
        analysis = self.analyze_skill_gap(current_skills if current_skills is not None else [], profession)
        return {
            "recommendedSkills": analysis["missingSkills"],
            "existingStrengths": analysis["strengthSkills"],
            "developmentPlan": analysis["developmentPlan"],
        }

    # ------------------------------------------------------------------
    # Text and search
    # ------------------------------------------------------------------

    def enhance_text(self, text: str, text_type: Optional[str] = DEFAULT_TEXT_TYPE) -> str:
        """Rewrite text in a more professional register.

        Unknown ``text_type`` values use the job description template.
        """
        _validate({"text": (text, _TEXT)})
        if len(text) < MIN_ENHANCE_TEXT_LENGTH:
            raise ValidationError(["text"], f"Text must be at least {MIN_ENHANCE_TEXT_LENGTH} characters long")

        prompt = build_prompt(Capability.ENHANCE_TEXT, {"text": text, "text_type": text_type or DEFAULT_TEXT_TYPE})
        return self._complete(Capability.ENHANCE_TEXT, prompt.as_messages()).strip()

    def enhance_search_query(self, query: str, search_type: Optional[str] = "job") -> List[str]:
        """Up to three alternative search terms; empty when the reply can't be parsed."""
        _validate({"query": (query, _TEXT)})
        suggestions = self._run(Capability.SEARCH_ENHANCEMENT, {"query": query, "search_type": search_type or "job"})
        return [s.strip() for s in suggestions if isinstance(s, str) and s.strip()][:MAX_SEARCH_SUGGESTIONS]

    # ------------------------------------------------------------------
    # Hiring support
    # ------------------------------------------------------------------

    def generate_interview_questions(
        self,
        job_title: str,
        skills: SkillList,
        experience_level: Optional[str] = DEFAULT_EXPERIENCE_LEVEL,
    ) -> Dict[str, Any]:
        _validate({
            "jobTitle": (job_title, _TEXT),
            "skills": (skills, _SKILLS),
        })
        result = self._run(Capability.INTERVIEW_QUESTIONS, {
            "job_title": job_title,
            "skills": skills,
            "experience_level": experience_level or DEFAULT_EXPERIENCE_LEVEL,
        })
        result["questions"] = [q for q in result["questions"] if isinstance(q, dict)]
        return result

    def estimate_salary(
        self,
        profession: str,
        skills: Optional[SkillList] = None,
        experience: Optional[int] = 0,
        location: Optional[str] = DEFAULT_LOCATION,
    ) -> Dict[str, Any]:
        """Estimate hourly and monthly pay ranges.

        Returns:
            {"hourlyRate": {min, max, currency}, "monthlyRate": {min, max, currency},
             "factors": [...], "marketInsights": str}
        """
        _validate({"profession": (profession, _TEXT)})
        return self._run(Capability.SALARY_ESTIMATE, {
            "profession": profession,
            "skills": skills,
            "experience": experience,
            "location": location,
        })

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    def _chat_turn(
        self,
        capability: Capability,
        store: ConversationStore,
        message: str,
        conversation_id: str,
        persona: str,
        empty_reply: str = "",
    ) -> str:
        history = store.history(conversation_id) or [store.system_message(persona)]
        messages = history + [{"role": "user", "content": message}]

        reply = self._complete(capability, messages) or empty_reply

        # Nothing is stored unless the completion succeeded
        store.append(conversation_id, "user", message, persona=persona)
        store.append(conversation_id, "assistant", reply, persona=persona)
        return reply

    def chat(self, message: str, conversation_id: str, role: str) -> str:
        """One assistant turn in a persistent conversation; returns the reply text."""
        _validate({
            "message": (message, _TEXT),
            "conversationId": (conversation_id, _TEXT),
            "role": (role, _TEXT),
        })
        if role not in self.conversations.personas:
            raise ValidationError(["role"], f"role must be one of: {', '.join(self.conversations.personas)}")
        return self._chat_turn(Capability.CHAT, self.conversations, message, conversation_id, role)

    def roleplay_chat(self, message: str, conversation_id: str, role: Optional[str] = "worker") -> str:
        """One turn where the assistant speaks as the caller's counterpart."""
        _validate({
            "message": (message, _TEXT),
            "conversationId": (conversation_id, _TEXT),
        })
        return self._chat_turn(
            Capability.ROLEPLAY_CHAT,
            self.roleplay_conversations,
            message,
            conversation_id,
            role or "general",
            empty_reply=ROLEPLAY_EMPTY_REPLY,
        )

    def clear_conversation(self, conversation_id: str) -> None:
        self.conversations.clear(conversation_id)

    def clear_all_conversations(self) -> None:
        self.conversations.clear_all()

    def clear_roleplay_conversation(self, conversation_id: str) -> None:
        self.roleplay_conversations.clear(conversation_id)
