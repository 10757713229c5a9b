"""
Purpose: Turn free-form generator output into validated GeneratedQuestion
records. Generative models are not format-reliable, so the pipeline widens
the search (code fence, balanced span), applies cheap syntactic repairs and
only then gives up.

Contract: extract_questions(raw_text) -> ExtractionResult, never raises.
- Valid records are kept even when siblings are malformed; the number of
  discarded elements is reported in `dropped`.
- When nothing usable is found the result carries an empty list, a
  `parse_error` and the `raw_preview` the caller must show as-is.

Testing: pure function; feed it strings, assert on the result.
"""

from __future__ import annotations
import json
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..logging_config import get_logger
from ..models import (
    DEFAULT_CATEGORY,
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    UNTITLED_QUESTION,
    ExtractionResult,
    GeneratedQuestion,
)
from ..utils.llm_json import as_text, locate_json, make_preview, repair_json

logger = get_logger(__name__)

PARSE_ERROR = "JSON 解析失败"
TITLE_FALLBACK_CHARS = 10

CONTAINER_KEYS = ("questions", "data", "list", "items", "question")
CONTENT_KEYS = ("content", "question", "text")
TITLE_KEYS = ("title",)
CATEGORY_KEYS = ("category", "type")
DIFFICULTY_KEYS = ("difficulty", "level")
ANSWER_HINT_KEYS = ("answer_hint", "answerHint", "answer", "hint")


@dataclass(frozen=True)
class ParseStrategy:
    """One rung of the fallback ladder: a name plus a pure candidate builder."""

    name: str
    build: Callable[[str, str], str]  # (working_text, original_text) -> candidate


STRATEGIES: tuple[ParseStrategy, ...] = (
    ParseStrategy("as_is", lambda working, original: working),
    ParseStrategy("repaired", lambda working, original: repair_json(working)),
    ParseStrategy(
        "repaired_full_text", lambda working, original: repair_json(original)
    ),
)


def first_present(obj: dict[str, Any], keys: tuple[str, ...]) -> Any:
    """Value of the first key that exists and is not null, else None."""
    for key in keys:
        value = obj.get(key)
        if value is not None:
            return value
    return None


def coerce_difficulty(value: Any) -> int:
    """Numeric coercion then clamp to [1, 5]; anything unusable becomes 1."""
    if isinstance(value, bool):
        return MIN_DIFFICULTY
    if isinstance(value, int):
        # JSON ints are unbounded; float() would overflow.
        return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, value))
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            number = 0.0
    else:
        number = 0.0

    if math.isnan(number) or math.isinf(number) or number == 0:
        return MIN_DIFFICULTY
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, int(number)))


def normalize_question(item: Any) -> Optional[GeneratedQuestion]:
    """One loosely-typed element -> GeneratedQuestion, or None to drop it."""
    if not isinstance(item, dict):
        return None

    content = as_text(first_present(item, CONTENT_KEYS)).strip()
    if not content:
        return None

    title = as_text(first_present(item, TITLE_KEYS)).strip()
    if not title:
        title = content[:TITLE_FALLBACK_CHARS] or UNTITLED_QUESTION

    category = as_text(first_present(item, CATEGORY_KEYS)).strip()

    return GeneratedQuestion(
        title=title,
        content=content,
        category=category or DEFAULT_CATEGORY,
        difficulty=coerce_difficulty(first_present(item, DIFFICULTY_KEYS)),
        answer_hint=as_text(first_present(item, ANSWER_HINT_KEYS)).strip(),
    )


def unwrap_items(parsed: Any) -> list[Any]:
    """
    Accept a bare array, an object wrapping the array under a known key,
    or a single object standing for one question.
    """
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        inner = first_present(parsed, CONTAINER_KEYS)
        if inner is None:
            return [parsed]
        return inner if isinstance(inner, list) else [inner]
    return []


def parse_candidate(candidate: str) -> tuple[list[GeneratedQuestion], int]:
    """(valid records, dropped count) for one candidate string."""
    try:
        parsed = json.loads(candidate)
    except (ValueError, RecursionError):
        return [], 0

    items = unwrap_items(parsed)
    questions = [q for q in (normalize_question(i) for i in items) if q is not None]
    return questions, len(items) - len(questions)


def extract_questions(raw_text: str) -> ExtractionResult:
    original = (raw_text or "").strip()
    working = locate_json(original)
    preview = make_preview(original)

    for strategy in STRATEGIES:
        candidate = strategy.build(working, original)
        if not candidate.strip():
            continue
        questions, dropped = parse_candidate(candidate)
        logger.debug(
            "question extraction strategy=%s records=%d dropped=%d",
            strategy.name,
            len(questions),
            dropped,
        )
        if questions:
            if dropped:
                logger.info(
                    "Kept %d generated question(s), dropped %d malformed item(s)",
                    len(questions),
                    dropped,
                )
            return ExtractionResult(
                questions=questions,
                raw_preview=preview,
                dropped=dropped,
                strategy=strategy.name,
            )

    logger.warning("Could not parse generated questions. Preview: %s", preview)
    return ExtractionResult(questions=[], raw_preview=preview, parse_error=PARSE_ERROR)
