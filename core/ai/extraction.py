"""
Response extraction - turn free-form model text into structured results.

Models are asked for a bare JSON object or array but often wrap it in prose
or code fences. ``extract_json`` finds the first bracketed span of the wanted
shape and parses it; anything unparseable degrades to a fallback value rather
than raising. Fallback shapes are declared once, in ``FALLBACKS``.
"""
import copy
import json
import logging
from typing import Any, Callable, Dict, Iterator, Literal, Union

from core.ai.models import Capability

logger = logging.getLogger(__name__)

Shape = Literal["object", "array"]

_BRACKETS = {
    "object": ("{", "}"),
    "array": ("[", "]"),
}
_PYTHON_TYPES = {
    "object": dict,
    "array": list,
}

_NOT_FOUND = object()


def _empty_rate() -> Dict[str, Any]:
    return {"min": 0, "max": 0, "currency": "INR"}


# Degraded result per capability, built from the raw model text so the
# prose is still returned to the caller.
FALLBACKS: Dict[Capability, Callable[[str], Any]] = {
    Capability.JOB_RECOMMENDATION: lambda text: {
        "recommendations": [],
        "skillGaps": [],
        "careerAdvice": text,
    },
    Capability.WORKER_RECOMMENDATION: lambda text: {
        "topMatches": [],
        "hiringAdvice": text,
    },
    Capability.SKILL_GAP: lambda text: {
        "missingSkills": [],
        "strengthSkills": [],
        "developmentPlan": text,
        "marketOutlook": "",
    },
    Capability.SEARCH_ENHANCEMENT: lambda text: [],
    Capability.INTERVIEW_QUESTIONS: lambda text: {
        "questions": [],
    },
    Capability.SALARY_ESTIMATE: lambda text: {
        "hourlyRate": _empty_rate(),
        "monthlyRate": _empty_rate(),
        "factors": [],
        "marketInsights": text,
    },
}

SHAPES: Dict[Capability, Shape] = {
    Capability.JOB_RECOMMENDATION: "object",
    Capability.WORKER_RECOMMENDATION: "object",
    Capability.SKILL_GAP: "object",
    Capability.SEARCH_ENHANCEMENT: "array",
    Capability.INTERVIEW_QUESTIONS: "object",
    Capability.SALARY_ESTIMATE: "object",
}


def _balanced_end(text: str, start: int, open_ch: str, close_ch: str) -> int:
    """Index of the bracket closing the one at ``start``, or -1.

    Brackets inside JSON string literals (including escaped quotes) are ignored.
    """
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _candidate_spans(text: str, shape: Shape) -> Iterator[str]:
    open_ch, close_ch = _BRACKETS[shape]
    start = text.find(open_ch)
    if start == -1:
        return

    end = _balanced_end(text, start, open_ch, close_ch)
    balanced = text[start:end + 1] if end != -1 else None
    if balanced is not None:
        yield balanced

    # Greedy span: first opening bracket to the last closing one
    last = text.rfind(close_ch)
    if last > start:
        greedy = text[start:last + 1]
        if greedy != balanced:
            yield greedy


def _parse(text: str, shape: Shape) -> Any:
    expected = _PYTHON_TYPES[shape]
    for span in _candidate_spans(text, shape):
        try:
            value = json.loads(span)
        except (ValueError, RecursionError):
            continue
        if isinstance(value, expected):
            return value
    return _NOT_FOUND


def _fallback_value(fallback: Union[Callable[[str], Any], Any], text: str) -> Any:
    if callable(fallback):
        return fallback(text)
    return copy.deepcopy(fallback)


def extract_json(text: str, shape: Shape = "object", fallback: Any = None) -> Any:
    """Parse the first JSON object/array embedded in ``text``.

    Args:
        text: Raw model output.
        shape: "object" or "array".
        fallback: Returned when nothing parses. A callable is invoked with the
            raw text; any other value is deep-copied.

    Returns:
        The parsed value, or the fallback. Never raises for any input text.
    """
    if shape not in _BRACKETS:
        raise ValueError(f"shape must be 'object' or 'array', got {shape!r}")
    if not isinstance(text, str):
        text = "" if text is None else str(text)

    value = _parse(text, shape)
    if value is _NOT_FOUND:
        return _fallback_value(fallback, text)
    return value


def ensure_keys(result: Dict[str, Any], defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Give ``result`` every key of ``defaults`` in its documented shape.

    Missing or null keys take the default, as do list and object keys whose
    parsed value is of another type. Any other parsed value wins.
    """
    for key, default in defaults.items():
        value = result.get(key)
        if value is None or (isinstance(default, (list, dict)) and not isinstance(value, type(default))):
            result[key] = copy.deepcopy(default)
    return result


def extract_structured(capability: Capability, text: str) -> Any:
    """Extract a capability's structured result, degrading to its fallback.

    Objects always carry every documented key of the capability.
    """
    capability = Capability(capability)
    shape = SHAPES[capability]
    fallback = FALLBACKS[capability]
    if not isinstance(text, str):
        text = "" if text is None else str(text)

    value = _parse(text, shape)
    if value is _NOT_FOUND:
        logger.warning(
            f"Could not parse {shape} from {capability.value} response "
            f"({len(text)} chars); returning fallback"
        )
        return fallback(text)

    if isinstance(value, dict):
        ensure_keys(value, fallback(""))
    return value
