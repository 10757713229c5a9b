"""Facade that keeps prompt construction behind one DefaultPromptFactory API."""

from __future__ import annotations
from typing import Optional

from ..models import Difficulty, StoredMessage
from . import feedback as _feedback
from . import interview as _interview
from . import question_generation as _generation
from .common import assemble as _assemble
from .common import render_transcript as _render_transcript


class DefaultPromptFactory:
    # QUESTION BANK
    def build_question_generation_system(self) -> str:
        return _generation.build_question_generation_system()

    def question_generation_instruction(self, *, resume: str) -> str:
        return _generation.question_generation_instruction(resume=resume)

    # INTERVIEW
    def build_interviewer_system(
        self,
        *,
        question: str,
        resume: Optional[str],
        difficulty: Optional[Difficulty] = None,
    ) -> str:
        return _interview.build_interviewer_system(
            question=question, resume=resume, difficulty=difficulty
        )

    # REPORT
    def build_report_system(self) -> str:
        return _feedback.build_report_system()

    def report_instruction(self, *, question: str, transcript: str) -> str:
        return _feedback.report_instruction(question=question, transcript=transcript)

    def render_transcript(self, messages: list[StoredMessage]) -> str:
        return _render_transcript(messages)

    def assemble(
        self, *, system: str, history: list[StoredMessage]
    ) -> list[dict[str, str]]:
        return _assemble(system=system, history=history)
