"""
Abstractions for pluggable services. Inversion of control: core depends
on interfaces, not concrete services. Enables fakes/mocks and future swaps.
Protocols define what services or components can do,
without saying how they do it.

Common protocols:
- LLMClient.chat(messages, settings) -> (reply, meta)
- PromptFactory builds the system prompts for generation, interview, report
- QuestionRepository is the question bank (CRUD lives outside this package)
- KeyValueMedium is the durable string store behind the session store

Testing: Use simple fake implementations to test the controller without network calls.
"""

from __future__ import annotations
from typing import Optional, Protocol

from .models import (
    Difficulty,
    GeneratedQuestion,
    LLMSettings,
    Question,
    QuestionSource,
    StoredMessage,
)


class LLMClient(Protocol):
    def chat(
        self,
        messages: list[dict[str, str]],
        settings: LLMSettings,
        system: Optional[str] = None,
    ) -> tuple[str, dict]: ...


class PromptFactory(Protocol):
    def build_question_generation_system(self) -> str: ...

    def question_generation_instruction(self, *, resume: str) -> str: ...

    def build_interviewer_system(
        self,
        *,
        question: str,
        resume: Optional[str],
        difficulty: Optional[Difficulty] = None,
    ) -> str: ...

    def build_report_system(self) -> str: ...

    def report_instruction(self, *, question: str, transcript: str) -> str: ...

    def render_transcript(self, messages: list[StoredMessage]) -> str: ...

    def assemble(
        self, *, system: str, history: list[StoredMessage]
    ) -> list[dict[str, str]]: ...


class QuestionRepository(Protocol):
    def create_many(
        self, questions: list[GeneratedQuestion], *, source: QuestionSource
    ) -> list[Question]: ...

    def get(self, question_id: str) -> Question: ...

    def increment_interview_count(self, question_id: str, delta: int = 1) -> int: ...

    def update_answer(self, question_id: str, answer: str) -> None: ...

    def get_resume(self) -> Optional[str]: ...

    def save_resume(self, content: str) -> None: ...


class KeyValueMedium(Protocol):
    """Synchronous string-keyed, string-valued durable storage."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...
