"""
Purpose: Generate question-bank drafts from the candidate's resume.
Why: decouple generation (prompt + generator + extraction) from the
controller; the caller decides whether to persist the drafts.

Errors:
- empty resume -> InvalidInputError (before any network call)
- generator failure -> UpstreamError (propagated untouched)
- unusable reply -> NOT raised: ExtractionResult with parse_error + preview

Testing: fake LLMClient returning canned text.
"""

from __future__ import annotations

from ..errors import InvalidInputError
from ..interfaces import LLMClient, PromptFactory, QuestionRepository
from ..logging_config import get_logger
from ..models import (
    ExtractionResult,
    GeneratedQuestion,
    LLMSettings,
    Question,
    QuestionSource,
)
from .question_extractor import extract_questions

logger = get_logger(__name__)


def generate_questions_llm(
    *,
    llm: LLMClient,
    prompts: PromptFactory,
    settings: LLMSettings,
    resume: str,
) -> tuple[ExtractionResult, dict]:
    """Return (ExtractionResult, meta) for one generation round."""
    if not (resume or "").strip():
        raise InvalidInputError("请先在设置中保存简历")

    text, meta = llm.chat(
        messages=[
            {"role": "system", "content": prompts.build_question_generation_system()},
            {
                "role": "user",
                "content": prompts.question_generation_instruction(resume=resume),
            },
        ],
        settings=settings,
    )
    result = extract_questions(text)
    if not result.ok:
        logger.error("Unparseable question generation reply: %s", text)
    return result, meta


def describe_failure(result: ExtractionResult) -> str:
    """User-facing message for an empty extraction, preview included verbatim."""
    reason = f" ({result.parse_error})" if result.parse_error else ""
    return f"无法解析 AI 返回的题目{reason}。原始返回预览：{result.raw_preview}"


def save_generated_questions(
    repo: QuestionRepository, questions: list[GeneratedQuestion]
) -> list[Question]:
    if not questions:
        raise InvalidInputError("没有可保存的题目")
    created = repo.create_many(questions, source=QuestionSource.AI)
    logger.info("Saved %d generated question(s)", len(created))
    return created
