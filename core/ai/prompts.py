"""
Prompt templates for the AI features.

Every builder is pure: it turns structured input into a system/user message
pair. Structured capabilities end the user message with the exact JSON shape
the model must answer with; the extractor relies on that instruction.
"""
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from core.ai.models import Capability, JobPosting, PromptPair, SkillList, WorkerProfile
from core.llm.system_prompts import (
    INTERVIEW_QUESTIONS_SYSTEM_PROMPT,
    JOB_RECOMMENDATION_SYSTEM_PROMPT,
    SALARY_ESTIMATE_SYSTEM_PROMPT,
    SEARCH_ENHANCEMENT_SYSTEM_PROMPT,
    SKILL_GAP_SYSTEM_PROMPT,
    TEXT_ENHANCEMENT_SYSTEM_PROMPT,
    WORKER_RECOMMENDATION_SYSTEM_PROMPT,
)

DEFAULT_LOCATION = "Kerala"
DEFAULT_HOURLY_RATE = "Not specified"
DEFAULT_EXPERIENCE_LEVEL = "mid"
DEFAULT_TEXT_TYPE = "jobDescription"
MAX_CANDIDATES_IN_PROMPT = 20

JOB_RECOMMENDATION_SHAPE = """{
  "recommendations": [
    {
      "jobType": "specific job category",
      "reasoning": "why this is a good match",
      "skillMatch": 85,
      "marketDemand": "high|medium|low",
      "estimatedSalary": "salary range in INR"
    }
  ],
  "skillGaps": ["skill1", "skill2"],
  "careerAdvice": "brief career development advice"
}"""

WORKER_RECOMMENDATION_SHAPE = """{
  "topMatches": [
    {
      "workerIndex": 0,
      "matchScore": 80,
      "strengths": ["strength1", "strength2"],
      "concerns": ["concern1"],
      "recommendation": "hire|interview|pass"
    }
  ],
  "hiringAdvice": "general advice for this position"
}"""

SKILL_GAP_SHAPE = """{
  "missingSkills": [
    {
      "skill": "skill name",
      "priority": "high|medium|low",
      "learningTime": "estimated time to learn",
      "resources": ["learning resource suggestions"]
    }
  ],
  "strengthSkills": ["skills they already have"],
  "developmentPlan": "step-by-step career development plan",
  "marketOutlook": "job market outlook for this profession"
}"""

INTERVIEW_QUESTIONS_SHAPE = """{
  "questions": [
    {
      "question": "the question",
      "purpose": "what this question assesses",
      "idealAnswerHint": "brief hint about good answers"
    }
  ]
}"""

SALARY_ESTIMATE_SHAPE = """{
  "hourlyRate": { "min": 0, "max": 0, "currency": "INR" },
  "monthlyRate": { "min": 0, "max": 0, "currency": "INR" },
  "factors": ["factor1", "factor2"],
  "marketInsights": "brief market insights"
}"""

TEXT_ENHANCEMENT_TEMPLATES = {
    "jobDescription": (
        "Enhance this job description to be more professional, clear, and attractive to skilled workers. "
        "Keep it concise (150-200 words) and highlight key requirements and benefits:\n\n\"{text}\""
    ),
    "workerBio": (
        "Improve this worker's professional bio to be more compelling and highlight their expertise. "
        "Keep it professional and under 150 words:\n\n\"{text}\""
    ),
    "jobTitle": "Make this job title more professional, clear, and searchable (one line only):\n\n\"{text}\"",
    "coverLetter": (
        "Enhance this cover letter/application message to be more professional and persuasive "
        "(200 words max):\n\n\"{text}\""
    ),
    "companyDescription": (
        "Improve this company description to be more professional and attractive to job seekers "
        "(150 words max):\n\n\"{text}\""
    ),
}

SEARCH_TEMPLATES = {
    "job": (
        "A user is searching for jobs with this query: \"{query}\". Suggest 3 alternative search terms or "
        "categories that might help them find better matches. Respond only with a JSON array of 3 strings, "
        "for example: [\"term1\", \"term2\", \"term3\"]"
    ),
    "worker": (
        "A user is searching for workers with this query: \"{query}\". Suggest 3 alternative search terms or "
        "skills that might help them find better matches. Respond only with a JSON array of 3 strings, "
        "for example: [\"term1\", \"term2\", \"term3\"]"
    ),
}


def _json_instruction(shape: str) -> str:
    return f"Respond with a single JSON object in exactly this format, with no other text:\n{shape}"


def format_skills(skills: Optional[SkillList], default: str = "Not specified") -> str:
    """Render a skill list (or a preformatted skill string) for a prompt."""
    if skills is None:
        return default
    if isinstance(skills, str):
        return skills.strip() or default
    rendered = ", ".join(str(s) for s in skills if str(s).strip())
    return rendered or default


def _or_default(value: Any, default: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return value


def summarize_candidates(candidates: Sequence[WorkerProfile]) -> str:
    """One line per candidate, labelled with the index the model must echo back."""
    lines = []
    for idx, worker in enumerate(candidates[:MAX_CANDIDATES_IN_PROMPT]):
        lines.append(
            f"Worker {idx}: {_or_default(worker.profession, 'Unspecified profession')}, "
            f"Skills: {format_skills(worker.skills, default='N/A')}, "
            f"Experience: {_or_default(worker.experience, 0)}y, "
            f"Rating: {_or_default(worker.rating, 'N/A')}"
        )
    return "\n".join(lines)


def build_job_recommendation_prompt(profile: WorkerProfile) -> PromptPair:
    job_types = ", ".join(profile.preferences or []) or "Any"
    user = (
        "As an AI career advisor for skilled workers in Kerala, India, analyze this worker profile and "
        "recommend the top 5 most suitable job opportunities:\n\n"
        "Worker Profile:\n"
        f"- Profession: {profile.profession}\n"
        f"- Skills: {format_skills(profile.skills)}\n"
        f"- Experience: {_or_default(profile.experience, 0)} years\n"
        f"- Location: {_or_default(profile.location, DEFAULT_LOCATION)}\n"
        f"- Preferred Job Types: {job_types}\n"
        f"- Hourly Rate: INR {_or_default(profile.hourly_rate, DEFAULT_HOURLY_RATE)}\n\n"
        "skillMatch is an integer from 0 to 100.\n"
        f"{_json_instruction(JOB_RECOMMENDATION_SHAPE)}"
    )
    return PromptPair(system=JOB_RECOMMENDATION_SYSTEM_PROMPT, user=user)


def build_worker_recommendation_prompt(
    job: JobPosting,
    candidates: Sequence[WorkerProfile] = (),
) -> PromptPair:
    workers_info = summarize_candidates(candidates) or "No workers provided - provide general matching criteria"
    requirements = job.requirements
    user = (
        "As a recruitment AI, match workers to this job posting and rank the top candidates:\n\n"
        "Job Details:\n"
        f"- Title: {job.title}\n"
        f"- Category: {job.category}\n"
        f"- Required Skills: {format_skills(job.skills)}\n"
        f"- Description: {_or_default(job.description, 'Not provided')}\n"
        f"- Location: {_or_default(job.location, DEFAULT_LOCATION)}\n"
        f"- Experience Required: {_or_default(requirements.experience, 0)} years\n"
        f"- Education: {_or_default(requirements.education, 'Not specified')}\n\n"
        f"Available Workers:\n{workers_info}\n\n"
        "workerIndex is the number after \"Worker\" above. matchScore is an integer from 0 to 100.\n"
        f"{_json_instruction(WORKER_RECOMMENDATION_SHAPE)}"
    )
    return PromptPair(system=WORKER_RECOMMENDATION_SYSTEM_PROMPT, user=user)


def build_skill_gap_prompt(current_skills: SkillList, target_profession: str) -> PromptPair:
    user = (
        f"Analyze the skill gap for a worker wanting to excel in {target_profession}.\n\n"
        f"Current Skills: {format_skills(current_skills, default='None')}\n"
        f"Target Profession: {target_profession}\n\n"
        f"{_json_instruction(SKILL_GAP_SHAPE)}"
    )
    return PromptPair(system=SKILL_GAP_SYSTEM_PROMPT, user=user)


def build_text_enhancement_prompt(text: str, text_type: str = DEFAULT_TEXT_TYPE) -> PromptPair:
    template = TEXT_ENHANCEMENT_TEMPLATES.get(text_type, TEXT_ENHANCEMENT_TEMPLATES[DEFAULT_TEXT_TYPE])
    return PromptPair(system=TEXT_ENHANCEMENT_SYSTEM_PROMPT, user=template.format(text=text))


def build_search_enhancement_prompt(query: str, search_type: str = "job") -> PromptPair:
    template = SEARCH_TEMPLATES["job"] if search_type == "job" else SEARCH_TEMPLATES["worker"]
    return PromptPair(system=SEARCH_ENHANCEMENT_SYSTEM_PROMPT, user=template.format(query=query))


def build_interview_questions_prompt(
    job_title: str,
    skills: SkillList,
    experience_level: Optional[str] = DEFAULT_EXPERIENCE_LEVEL,
) -> PromptPair:
    user = (
        f"Generate 5 relevant interview questions for a {job_title} position requiring these skills: "
        f"{format_skills(skills)}. Experience level: {_or_default(experience_level, DEFAULT_EXPERIENCE_LEVEL)}.\n\n"
        f"{_json_instruction(INTERVIEW_QUESTIONS_SHAPE)}"
    )
    return PromptPair(system=INTERVIEW_QUESTIONS_SYSTEM_PROMPT, user=user)


def build_salary_estimate_prompt(
    profession: str,
    skills: Optional[SkillList] = None,
    experience: Optional[int] = 0,
    location: Optional[str] = DEFAULT_LOCATION,
) -> PromptPair:
    location = _or_default(location, DEFAULT_LOCATION)
    region = location if location.lower() == DEFAULT_LOCATION.lower() else f"{location}, {DEFAULT_LOCATION}"
    user = (
        f"Estimate the fair salary range for a {profession} in {region} with "
        f"{_or_default(experience, 0)} years of experience and these skills: {format_skills(skills)}.\n\n"
        "Use numbers (not strings) for min and max.\n"
        f"{_json_instruction(SALARY_ESTIMATE_SHAPE)}"
    )
    return PromptPair(system=SALARY_ESTIMATE_SYSTEM_PROMPT, user=user)


_BUILDERS: Dict[Capability, Callable[..., PromptPair]] = {
    Capability.JOB_RECOMMENDATION: build_job_recommendation_prompt,
    Capability.WORKER_RECOMMENDATION: build_worker_recommendation_prompt,
    Capability.SKILL_GAP: build_skill_gap_prompt,
    Capability.ENHANCE_TEXT: build_text_enhancement_prompt,
    Capability.SEARCH_ENHANCEMENT: build_search_enhancement_prompt,
    Capability.INTERVIEW_QUESTIONS: build_interview_questions_prompt,
    Capability.SALARY_ESTIMATE: build_salary_estimate_prompt,
}


def build_prompt(capability: Capability, structured_input: Mapping[str, Any]) -> PromptPair:
    """Build the system/user prompt pair for a one-shot capability.

    Args:
        capability: Which feature the prompt is for.
        structured_input: Keyword arguments of that capability's builder.

    Raises:
        KeyError: For conversational capabilities, which have no one-shot prompt.
    """
    builder = _BUILDERS[Capability(capability)]
    return builder(**structured_input)
