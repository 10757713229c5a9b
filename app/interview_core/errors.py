"""
Purpose: One exception hierarchy for the whole core.
Why: callers (and the UI that sits on top) need to tell "the generator is
unreachable" apart from "the generator replied with something unusable",
and both apart from bad input or broken configuration.

Parse failures of the question pipeline are NOT exceptions: they come back
as data (see services.question_extractor). Only the report path raises.
"""

from __future__ import annotations
from typing import Any, Optional


class InterviewCoreError(Exception):
    """
    Root of every error raised by this package.

    Attributes:
        code: short machine-readable identifier (e.g. "UPSTREAM_AUTH")
        message: human-readable text, safe to show verbatim
        details: extra debugging context
    """

    default_code = "CORE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code or self.default_code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{self.code}] {message}")


class ConfigurationError(InterviewCoreError):
    """Settings failed to load or validate."""

    default_code = "CONF_ERROR"


class MissingCredentialError(ConfigurationError):
    default_code = "CONF_MISSING_API_KEY"


class InvalidInputError(InterviewCoreError):
    default_code = "INVALID_INPUT"


class UpstreamError(InterviewCoreError):
    """The text generator itself failed (network, auth, rate limit, 5xx)."""

    default_code = "UPSTREAM_ERROR"


class EmptyReplyError(UpstreamError):
    default_code = "UPSTREAM_EMPTY_REPLY"


class ReportParseError(InterviewCoreError):
    """The generator replied, but no report object could be recovered."""

    default_code = "REPORT_PARSE_ERROR"


class QuestionNotFoundError(InterviewCoreError):
    default_code = "QUESTION_NOT_FOUND"
