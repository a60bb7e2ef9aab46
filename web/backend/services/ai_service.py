#!/usr/bin/env python3
"""
AI feature service - connects stored records to the AI assistant.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session
from tenacity import Retrying, RetryCallState, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.ai.assistant import AIAssistant
from core.ai.models import is_blank
from core.ai.prompts import MAX_CANDIDATES_IN_PROMPT
from core.errors import UpstreamError, ValidationError
from database.models import Worker
from database.repositories import JobRepository, WorkerRepository
from ..exceptions import JobNotFoundException, WorkerNotFoundException

logger = logging.getLogger(__name__)


def _coerce_index(value: Any) -> Optional[int]:
    """Turn a model-supplied index into an int, or None if it isn't one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def join_worker_matches(
    matches: Sequence[Dict[str, Any]],
    candidates: Sequence[Worker],
    max_results: int,
) -> Tuple[List[Dict[str, Any]], int]:
    """
    Join AI matches back to candidate records by ``workerIndex``.

    The model only saw the first MAX_CANDIDATES_IN_PROMPT candidates, so only
    those indices are valid. Non-integer, negative, out-of-range and repeated
    indices are dropped.

    Returns:
        (enriched matches, at most ``max_results``; number of dropped matches)
    """
    shown = min(len(candidates), MAX_CANDIDATES_IN_PROMPT)
    enriched = []
    seen = set()
    dropped = 0

    for match in matches:
        index = _coerce_index(match.get("workerIndex"))
        if index is None or not 0 <= index < shown or index in seen:
            dropped += 1
            continue
        seen.add(index)
        enriched.append({**match, "workerIndex": index, "worker": candidates[index].to_summary()})

    if dropped:
        logger.warning(f"Dropped {dropped} AI match(es) with invalid workerIndex ({shown} candidates shown)")

    return enriched[:max_results], dropped


def _log_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "Upstream AI error (attempt %s), retrying once: %s",
        retry_state.attempt_number, retry_state.outcome.exception(),
    )


class AIFeatureService:
    """Service for the AI endpoints."""

    def __init__(
        self,
        assistant: AIAssistant,
        db: Session,
        retry_upstream_once: bool = False,
        retry_wait: Optional[Callable[[RetryCallState], float]] = None,
    ):
        self.assistant = assistant
        self.db = db
        self.workers = WorkerRepository(db)
        self.jobs = JobRepository(db)
        self.retry_upstream_once = retry_upstream_once
        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=1, max=4)

    def run(self, operation: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Run an assistant operation.

        With ``retry_upstream_once`` an UpstreamError is retried exactly once
        after a short backoff. Validation and configuration errors are never
        retried.
        """
        if not self.retry_upstream_once:
            return operation(*args, **kwargs)

        retryer = Retrying(
            retry=retry_if_exception_type(UpstreamError),
            stop=stop_after_attempt(2),
            wait=self.retry_wait,
            before_sleep=_log_retry,
            reraise=True,
        )
        return retryer(operation, *args, **kwargs)

    def recommend_jobs(self, worker_id: Optional[str]) -> Dict[str, Any]:
        """
        Job recommendations for a stored worker.

        Raises:
            ValidationError: If no worker ID is given.
            WorkerNotFoundException: If the worker does not exist.
        """
        if is_blank(worker_id):
            raise ValidationError(["workerId"], "Worker ID is required")

        worker = self.workers.get_by_id(worker_id)
        if worker is None:
            raise WorkerNotFoundException("Worker profile not found")

        return self.run(self.assistant.recommend_jobs_for_worker, worker.to_profile())

    def recommend_workers(self, job_id: Optional[str], max_results: int = 10) -> Dict[str, Any]:
        """
        Ranked worker recommendations for a stored job.

        Candidates are available workers whose profession matches the job
        category; the AI ranking is joined back to them by index.

        Raises:
            ValidationError: If no job ID is given.
            JobNotFoundException: If the job does not exist.
        """
        if is_blank(job_id):
            raise ValidationError(["jobId"], "Job ID is required")

        job = self.jobs.get_by_id(job_id)
        if job is None:
            raise JobNotFoundException("Job not found")

        candidates = self.workers.find_candidates(job.category)
        recommendations = self.run(
            self.assistant.recommend_workers_for_job,
            job.to_posting(),
            [worker.to_profile() for worker in candidates],
        )

        matches, dropped = join_worker_matches(recommendations["topMatches"], candidates, max_results)

        return {
            "matches": matches,
            "hiringAdvice": recommendations["hiringAdvice"],
            "totalAnalyzed": len(candidates),
            "droppedMatches": dropped,
        }
