"""
Purpose: Parse the post-interview review into an InterviewReport.
Why separate from the question pipeline: a three-field report has no
meaningful partial form, so this path is all-or-nothing and raises.
"""

from __future__ import annotations

from ..errors import ReportParseError
from ..logging_config import get_logger
from ..models import InterviewReport
from ..utils.llm_json import as_text, make_preview, require_object

logger = get_logger(__name__)

REPORT_FIELDS = ("evaluation_expression", "evaluation_content", "refined_answer")


def extract_report(raw_text: str) -> InterviewReport:
    """Raises ReportParseError unless exactly one JSON object can be recovered."""
    try:
        obj = require_object(
            raw_text or "", err="LLM did not return a valid JSON object for the report."
        )
    except ValueError as e:
        preview = make_preview((raw_text or "").strip())
        logger.warning("Report parse failed: %s. Preview: %s", e, preview)
        raise ReportParseError(str(e), details={"raw_preview": preview}) from e

    return InterviewReport(**{name: as_text(obj.get(name)) for name in REPORT_FIELDS})
