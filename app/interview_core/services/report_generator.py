"""
Purpose: Turn a finished interview transcript into an InterviewReport.
Side effect: exactly one interview-count increment per accepted report.
Generator retries happen inside the client, before a report exists, so
they can never double-count; a parse failure counts nothing.

Testing: fake LLMClient + InMemoryQuestionRepository.
"""

from __future__ import annotations

from ..errors import InvalidInputError
from ..interfaces import LLMClient, PromptFactory, QuestionRepository
from ..logging_config import get_logger
from ..models import InterviewReport, LLMSettings, StoredMessage
from .report_extractor import extract_report

logger = get_logger(__name__)


def generate_interview_report(
    *,
    llm: LLMClient,
    prompts: PromptFactory,
    settings: LLMSettings,
    repo: QuestionRepository,
    question_id: str,
    question_content: str,
    messages: list[StoredMessage],
) -> tuple[InterviewReport, dict]:
    """Return (InterviewReport, meta). Raises UpstreamError / ReportParseError."""
    transcript = prompts.render_transcript(messages)
    if not transcript:
        raise InvalidInputError("对话记录为空")

    text, meta = llm.chat(
        messages=[
            {"role": "system", "content": prompts.build_report_system()},
            {
                "role": "user",
                "content": prompts.report_instruction(
                    question=question_content, transcript=transcript
                ),
            },
        ],
        settings=settings,
    )
    report = extract_report(text)

    count = repo.increment_interview_count(question_id, 1)
    logger.info("Report accepted for question %s (interviews: %d)", question_id, count)
    return report, meta
