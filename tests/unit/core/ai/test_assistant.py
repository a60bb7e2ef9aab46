"""
Unit tests for the AI assistant features.

Tests verify:
- Required-field validation reports every offending field before any completion
- Structured replies are extracted and normalized; prose degrades to fallbacks
- Per-capability sampling options
- Chat turns are stored only when the completion succeeds
"""
import json

import pytest

from core.ai.assistant import (
    CAPABILITY_OPTIONS,
    ROLEPLAY_EMPTY_REPLY,
    AIAssistant,
    normalize_score,
)
from core.ai.conversation_store import ConversationStore
from core.ai.models import Capability, JobPosting, WorkerProfile
from core.errors import ConfigurationError, UpstreamError, ValidationError
from core.llm.system_prompts import ASSISTANT_PERSONAS, ROLEPLAY_PERSONAS
from tests.mocks.llm_mocks import ScriptedLLMProvider


def _script(assistant, *replies):
    assistant.llm.replies = list(replies)


# (operation, valid keyword arguments, argument -> reported field name)
REQUIRED_FIELDS = [
    ("analyze_skill_gap",
     {"current_skills": ["Wiring"], "target_profession": "Welder"},
     {"current_skills": "currentSkills", "target_profession": "targetProfession"}),
    ("recommend_skills", {"profession": "Electrician"}, {"profession": "profession"}),
    ("enhance_text", {"text": "Need an electrician for wiring"}, {"text": "text"}),
    ("enhance_search_query", {"query": "plumber"}, {"query": "query"}),
    ("generate_interview_questions",
     {"job_title": "Welder", "skills": ["MIG"]},
     {"job_title": "jobTitle", "skills": "skills"}),
    ("estimate_salary", {"profession": "Electrician"}, {"profession": "profession"}),
    ("chat",
     {"message": "Hi", "conversation_id": "c1", "role": "worker"},
     {"message": "message", "conversation_id": "conversationId", "role": "role"}),
    ("roleplay_chat",
     {"message": "Hi", "conversation_id": "c1"},
     {"message": "message", "conversation_id": "conversationId"}),
]

SINGLE_OMISSIONS = [
    (operation, {**kwargs, argument: None}, field)
    for operation, kwargs, fields in REQUIRED_FIELDS
    for argument, field in fields.items()
]


class TestValidationCompleteness:
    """Omitting any one required field names exactly that field."""

    @pytest.mark.parametrize("operation, kwargs, field", SINGLE_OMISSIONS)
    def test_single_missing_field_is_named(self, assistant, llm, operation, kwargs, field):
        with pytest.raises(ValidationError) as exc_info:
            getattr(assistant, operation)(**kwargs)

        assert exc_info.value.fields == [field]
        assert llm.calls == []

    @pytest.mark.parametrize("operation, kwargs", [(op, kwargs) for op, kwargs, _ in REQUIRED_FIELDS])
    def test_all_required_fields_never_raise(self, assistant, operation, kwargs):
        getattr(assistant, operation)(**kwargs)

    @pytest.mark.parametrize("field, profile_kwargs", [("profession", {"profession": None})])
    def test_job_recommendation_profile_fields(self, assistant, field, profile_kwargs):
        with pytest.raises(ValidationError) as exc_info:
            assistant.recommend_jobs_for_worker(WorkerProfile(**profile_kwargs))
        assert exc_info.value.fields == [field]

        assistant.recommend_jobs_for_worker(WorkerProfile(profession="Mason"))

    @pytest.mark.parametrize("field, job_kwargs", [
        ("title", {"category": "electrical"}),
        ("category", {"title": "Site Electrician"}),
    ])
    def test_worker_recommendation_job_fields(self, assistant, field, job_kwargs):
        with pytest.raises(ValidationError) as exc_info:
            assistant.recommend_workers_for_job(JobPosting(**job_kwargs), [])
        assert exc_info.value.fields == [field]

        assistant.recommend_workers_for_job(JobPosting(title="Site Electrician", category="electrical"), [])


class TestValidation:
    """Every missing field is named, and the provider is never called."""

    def test_skill_gap_reports_both_fields(self, assistant, llm):
        with pytest.raises(ValidationError) as exc_info:
            assistant.analyze_skill_gap(None, "")

        assert exc_info.value.fields == ["currentSkills", "targetProfession"]
        assert llm.calls == []

    def test_interview_questions_reports_both_fields(self, assistant, llm):
        with pytest.raises(ValidationError) as exc_info:
            assistant.generate_interview_questions("  ", None)

        assert exc_info.value.fields == ["jobTitle", "skills"]
        assert llm.calls == []

    def test_chat_reports_every_field(self, assistant, llm):
        with pytest.raises(ValidationError) as exc_info:
            assistant.chat("", None, None)

        assert exc_info.value.fields == ["message", "conversationId", "role"]
        assert llm.calls == []

    def test_chat_rejects_unknown_role(self, assistant, llm):
        with pytest.raises(ValidationError) as exc_info:
            assistant.chat("Hi", "c1", "contractor")

        assert exc_info.value.fields == ["role"]
        assert llm.calls == []
        assert "c1" not in assistant.conversations

    @pytest.mark.parametrize("role", ["worker", "employer", "admin", "general"])
    def test_chat_accepts_every_persona_role(self, assistant, role):
        assistant.chat("Hi", "c1", role)
        assert "c1" in assistant.conversations

    def test_wrong_type_is_invalid(self, assistant, llm):
        with pytest.raises(ValidationError) as exc_info:
            assistant.estimate_salary(42)

        assert exc_info.value.fields == ["profession"]

    def test_worker_recommendation_needs_title_and_category(self, assistant, llm):
        with pytest.raises(ValidationError) as exc_info:
            assistant.recommend_workers_for_job(JobPosting(title="Plumber"), [])

        assert exc_info.value.fields == ["category"]
        assert llm.calls == []

    def test_job_recommendation_needs_profession(self, assistant, llm):
        with pytest.raises(ValidationError) as exc_info:
            assistant.recommend_jobs_for_worker(WorkerProfile())

        assert exc_info.value.fields == ["profession"]

    def test_enhance_text_too_short(self, assistant, llm):
        with pytest.raises(ValidationError) as exc_info:
            assistant.enhance_text("too short")

        assert exc_info.value.fields == ["text"]
        assert "at least 10 characters" in str(exc_info.value)
        assert llm.calls == []

    def test_search_needs_query(self, assistant, llm):
        with pytest.raises(ValidationError):
            assistant.enhance_search_query("")
        assert llm.calls == []


class TestNormalizeScore:

    @pytest.mark.parametrize("value, expected", [
        (85, 85),
        (85.6, 86),
        ("85", 85),
        ("85%", 85),
        (150, 100),
        (-3, 0),
        ("high", None),
        (None, None),
        (True, None),
    ])
    def test_normalize(self, value, expected):
        assert normalize_score(value) == expected


class TestRecommendations:

    def test_job_recommendations_are_normalized_and_capped(self, assistant, llm):
        recs = [
            {"jobType": f"Job {i}", "skillMatch": f"{90 - i}%", "marketDemand": "HIGH"}
            for i in range(7)
        ]
        _script(assistant, json.dumps({"recommendations": recs, "skillGaps": ["Solar"], "careerAdvice": "Go"}))

        result = assistant.recommend_jobs_for_worker(WorkerProfile(profession="Electrician"))

        assert len(result["recommendations"]) == 5
        assert result["recommendations"][0]["skillMatch"] == 90
        assert result["recommendations"][0]["marketDemand"] == "high"
        assert result["skillGaps"] == ["Solar"]
        assert llm.last_options == CAPABILITY_OPTIONS[Capability.JOB_RECOMMENDATION]

    def test_job_recommendations_prose_fallback(self, assistant, llm):
        _script(assistant, "You would make a great site supervisor.")

        result = assistant.recommend_jobs_for_worker(WorkerProfile(profession="Mason"))

        assert result == {
            "recommendations": [],
            "skillGaps": [],
            "careerAdvice": "You would make a great site supervisor.",
        }

    def test_worker_recommendations_show_at_most_twenty(self, assistant, llm):
        candidates = [WorkerProfile(profession="Electrician") for _ in range(25)]
        _script(assistant, json.dumps({
            "topMatches": [
                {"workerIndex": 3, "matchScore": "92", "recommendation": "Hire"},
                {"workerIndex": 1, "matchScore": 40, "recommendation": "maybe"},
                "garbage",
            ],
            "hiringAdvice": "Interview two.",
        }))

        result = assistant.recommend_workers_for_job(
            JobPosting(title="Site Electrician", category="electrical"), candidates
        )

        user = llm.last_messages[1]["content"]
        assert "Worker 19:" in user
        assert "Worker 20:" not in user
        assert result["topMatches"] == [
            {"workerIndex": 3, "matchScore": 92, "recommendation": "hire"},
            {"workerIndex": 1, "matchScore": 40, "recommendation": None},
        ]
        assert result["hiringAdvice"] == "Interview two."
        assert llm.last_options.temperature == 0.3
        assert llm.last_options.max_tokens == 2000


class TestSkills:

    def test_skill_gap_prose_fallback(self, assistant):
        _script(assistant, "I think you should learn welding.")

        result = assistant.analyze_skill_gap(["Wiring"], "Fabricator")

        assert result == {
            "missingSkills": [],
            "strengthSkills": [],
            "developmentPlan": "I think you should learn welding.",
            "marketOutlook": "",
        }

    def test_skill_gap_accepts_skill_string(self, assistant, llm):
        _script(assistant, '{"missingSkills": [], "strengthSkills": ["Wiring"]}')

        result = assistant.analyze_skill_gap("Wiring, conduit", "Lineman")

        assert result["strengthSkills"] == ["Wiring"]
        assert result["developmentPlan"] == ""
        assert "Current Skills: Wiring, conduit" in llm.last_messages[1]["content"]

    def test_recommend_skills_reshapes_gap_analysis(self, assistant, llm):
        missing = [{"skill": "Solar", "priority": "high"}]
        _script(assistant, json.dumps({
            "missingSkills": missing,
            "strengthSkills": ["Wiring"],
            "developmentPlan": "Take a solar course",
            "marketOutlook": "Strong",
        }))

        result = assistant.recommend_skills("Electrician")

        assert result == {
            "recommendedSkills": missing,
            "existingStrengths": ["Wiring"],
            "developmentPlan": "Take a solar course",
        }
        assert "Current Skills: None" in llm.last_messages[1]["content"]

    def test_recommend_skills_needs_profession(self, assistant):
        with pytest.raises(ValidationError) as exc_info:
            assistant.recommend_skills(None, ["Wiring"])
        assert exc_info.value.fields == ["profession"]


class TestTextAndSearch:

    def test_enhance_text_returns_stripped_reply(self, assistant, llm):
        _script(assistant, "  Experienced electrician wanted for a residential project.  \n")

        result = assistant.enhance_text("need electrician urgently", "jobDescription")

        assert result == "Experienced electrician wanted for a residential project."
        assert llm.last_options == CAPABILITY_OPTIONS[Capability.ENHANCE_TEXT]

    def test_enhance_text_unknown_type_still_works(self, assistant, llm):
        _script(assistant, "Better text")
        assert assistant.enhance_text("write me something nice", "haiku") == "Better text"

    def test_search_suggestions_capped_at_three(self, assistant, llm):
        _script(assistant, 'Here you go: ["wireman", " ", "electrical technician", 7, "lineman", "fitter"]')

        result = assistant.enhance_search_query("electrician", "job")

        assert result == ["wireman", "electrical technician", "lineman"]

    def test_search_prose_returns_empty_list(self, assistant):
        _script(assistant, "Try searching for wireman.")
        assert assistant.enhance_search_query("electrician") == []


class TestHiringSupport:

    def test_interview_questions_drop_non_objects(self, assistant):
        _script(assistant, json.dumps({"questions": [{"question": "Q1"}, "Q2"]}))

        result = assistant.generate_interview_questions("Plumber", ["Pipe fitting"])

        assert result == {"questions": [{"question": "Q1"}]}

    def test_salary_estimate_returns_parsed_values_unmodified(self, assistant, llm):
        _script(assistant, (
            '{"hourlyRate":{"min":300,"max":500,"currency":"INR"},'
            '"monthlyRate":{"min":20000,"max":35000,"currency":"INR"},'
            '"factors":["experience"],"marketInsights":"steady demand"}'
        ))

        result = assistant.estimate_salary(
            profession="Electrician", skills=["Wiring"], experience=5, location="Kochi"
        )

        assert result == {
            "hourlyRate": {"min": 300, "max": 500, "currency": "INR"},
            "monthlyRate": {"min": 20000, "max": 35000, "currency": "INR"},
            "factors": ["experience"],
            "marketInsights": "steady demand",
        }
        assert "in Kochi, Kerala with 5 years of experience" in llm.last_messages[1]["content"]

    def test_salary_estimate_structured_reply(self, assistant, llm):
        reply = (
            '```json\n{"hourlyRate":{"min":300,"max":500,"currency":"INR"},'
            '"monthlyRate":{"min":45000,"max":75000,"currency":"INR"},'
            '"factors":["experience"],"marketInsights":"steady"}\n```'
        )
        _script(assistant, reply)

        result = assistant.estimate_salary("Electrician", ["wiring"], 5, "Kerala")

        assert result["hourlyRate"] == {"min": 300, "max": 500, "currency": "INR"}
        assert result["monthlyRate"] == {"min": 45000, "max": 75000, "currency": "INR"}
        assert result["factors"] == ["experience"]
        assert result["marketInsights"] == "steady"
        assert llm.last_options.temperature == 0.3
        assert llm.last_options.max_tokens == 500

    def test_salary_estimate_prose_fallback(self, assistant):
        _script(assistant, "Around 400 rupees an hour.")

        result = assistant.estimate_salary("Electrician")

        assert result == {
            "hourlyRate": {"min": 0, "max": 0, "currency": "INR"},
            "monthlyRate": {"min": 0, "max": 0, "currency": "INR"},
            "factors": [],
            "marketInsights": "Around 400 rupees an hour.",
        }


class TestErrorPropagation:

    def test_upstream_error_propagates(self, assistant):
        _script(assistant, UpstreamError("timed out"))

        with pytest.raises(UpstreamError):
            assistant.estimate_salary("Electrician")

    def test_configuration_error_propagates(self, assistant):
        _script(assistant, ConfigurationError("no key"))

        with pytest.raises(ConfigurationError):
            assistant.analyze_skill_gap(["Wiring"], "Lineman")


class TestWrongTypedReplies:
    """Valid JSON with a non-list where a list belongs degrades to an empty list."""

    def test_worker_matches_not_a_list(self, assistant):
        _script(assistant, '{"topMatches": 7, "hiringAdvice": "x"}')

        result = assistant.recommend_workers_for_job(JobPosting(title="Site Electrician", category="electrical"), [])

        assert result == {"topMatches": [], "hiringAdvice": "x"}

    def test_job_recommendations_not_a_list(self, assistant):
        _script(assistant, '{"recommendations": 3, "skillGaps": [], "careerAdvice": "Keep going"}')

        result = assistant.recommend_jobs_for_worker(WorkerProfile(profession="Mason"))

        assert result == {"recommendations": [], "skillGaps": [], "careerAdvice": "Keep going"}

    def test_interview_questions_not_a_list(self, assistant):
        _script(assistant, '{"questions": true}')

        assert assistant.generate_interview_questions("Welder", ["MIG"]) == {"questions": []}


class TestChat:

    def test_first_turn_uses_persona_and_stores_exchange(self, assistant, llm):
        _script(assistant, "Hello! How can I help?")

        reply = assistant.chat("Hi", "c1", "employer")

        assert reply == "Hello! How can I help?"
        assert llm.last_messages == [
            {"role": "system", "content": ASSISTANT_PERSONAS["employer"]},
            {"role": "user", "content": "Hi"},
        ]
        assert llm.last_options == CAPABILITY_OPTIONS[Capability.CHAT]
        assert [m["role"] for m in assistant.conversations.history("c1")] == ["system", "user", "assistant"]

    def test_second_turn_sends_prior_history(self, assistant, llm):
        _script(assistant, "First reply", "Second reply")

        assistant.chat("Hi", "c1", "worker")
        assistant.chat("Any jobs?", "c1", "worker")

        assert [m["content"] for m in llm.last_messages[1:]] == ["Hi", "First reply", "Any jobs?"]
        assert len(assistant.conversations.history("c1")) == 5

    def test_failed_completion_stores_nothing(self, assistant, llm):
        _script(assistant, "First reply", UpstreamError("boom"))
        assistant.chat("Hi", "c1", "worker")

        with pytest.raises(UpstreamError):
            assistant.chat("Are you there?", "c1", "worker")

        contents = [m["content"] for m in assistant.conversations.history("c1")]
        assert "Are you there?" not in contents
        assert len(contents) == 3

    def test_failed_first_turn_creates_no_conversation(self, assistant):
        _script(assistant, UpstreamError("boom"))

        with pytest.raises(UpstreamError):
            assistant.chat("Hi", "c-new", "worker")

        assert "c-new" not in assistant.conversations

    def test_history_stays_capped(self, assistant, llm):
        for i in range(10):
            assistant.chat(f"message {i}", "c1", "worker")

        history = assistant.conversations.history("c1")
        assert len(history) == 6
        assert history[0]["role"] == "system"

    def test_clear_conversation(self, assistant):
        assistant.chat("Hi", "c1", "worker")

        assistant.clear_conversation("c1")
        assistant.clear_conversation("c1")

        assert "c1" not in assistant.conversations

    def test_clear_all_conversations(self, assistant):
        assistant.chat("Hi", "c1", "worker")
        assistant.chat("Hi", "c2", "admin")

        assistant.clear_all_conversations()

        assert len(assistant.conversations) == 0


class TestRoleplayChat:

    def test_worker_talks_to_simulated_employer(self, assistant, llm):
        _script(assistant, "We need you on site Monday.")

        reply = assistant.roleplay_chat("When do I start?", "r1", "worker")

        assert reply == "We need you on site Monday."
        assert llm.last_messages[0]["content"] == ROLEPLAY_PERSONAS["worker"]
        assert llm.last_options.max_tokens == 300

    def test_employer_talks_to_simulated_worker(self, assistant, llm):
        assistant.roleplay_chat("What is your rate?", "r2", "employer")
        assert llm.last_messages[0]["content"] == ROLEPLAY_PERSONAS["general"]

    def test_empty_reply_is_replaced(self, assistant, llm):
        _script(assistant, "")

        reply = assistant.roleplay_chat("Hello?", "r1", "worker")

        assert reply == ROLEPLAY_EMPTY_REPLY
        assert assistant.roleplay_conversations.history("r1")[-1]["content"] == ROLEPLAY_EMPTY_REPLY

    def test_roleplay_and_assistant_chats_are_separate(self, assistant):
        assistant.roleplay_chat("Hi", "same-id", "worker")

        assert "same-id" in assistant.roleplay_conversations
        assert "same-id" not in assistant.conversations

        assistant.clear_roleplay_conversation("same-id")
        assert "same-id" not in assistant.roleplay_conversations


class TestDefaults:

    def test_default_stores_and_option_overrides(self):
        from core.llm.interfaces import CompletionOptions

        custom = CompletionOptions(temperature=0.1, max_tokens=50)
        assistant = AIAssistant(ScriptedLLMProvider("ok"), options={Capability.CHAT: custom})

        assistant.chat("Hi", "c1", "worker")

        assert assistant.llm.last_options is custom
        assert assistant.options[Capability.SKILL_GAP] == CAPABILITY_OPTIONS[Capability.SKILL_GAP]
        assert assistant.conversations.max_history == 20
        assert assistant.roleplay_conversations.personas == ROLEPLAY_PERSONAS

    def test_injected_stores_are_used_even_when_empty(self):
        store = ConversationStore(max_entries=2, max_history=4)
        roleplay_store = ConversationStore(max_entries=2, max_history=4, personas=ROLEPLAY_PERSONAS)

        assistant = AIAssistant(
            ScriptedLLMProvider("ok"),
            conversations=store,
            roleplay_conversations=roleplay_store,
        )

        assert assistant.conversations is store
        assert assistant.roleplay_conversations is roleplay_store

        assistant.chat("Hi", "c1", "worker")
        assert "c1" in store
