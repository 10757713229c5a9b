"""
Purpose: Question bank collaborator (in-memory).
Why: the core only needs createMany / counter increment / answer update /
the singleton resume text; the real store lives outside this package.
Every call is atomic on its own; nothing here spans calls.
"""

from __future__ import annotations
import uuid
from typing import Optional

from ..errors import QuestionNotFoundError
from ..models import (
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    UNTITLED_QUESTION,
    GeneratedQuestion,
    Question,
    QuestionSource,
)


class InMemoryQuestionRepository:
    def __init__(self) -> None:
        self._questions: dict[str, Question] = {}
        self._resume: Optional[str] = None

    def add(self, question: Question) -> Question:
        self._questions[question.id] = question
        return question

    def create_many(
        self,
        questions: list[GeneratedQuestion],
        *,
        source: QuestionSource = QuestionSource.AI,
    ) -> list[Question]:
        created = []
        for q in questions:
            row = Question(
                id=str(uuid.uuid4()),
                title=q.title.strip() or UNTITLED_QUESTION,
                content=q.content.strip(),
                category=q.category.strip(),
                difficulty=min(MAX_DIFFICULTY, max(MIN_DIFFICULTY, q.difficulty)),
                answer=q.answer_hint.strip() or None,
                source=source,
            )
            created.append(row)
        for row in created:
            self._questions[row.id] = row
        return created

    def get(self, question_id: str) -> Question:
        try:
            return self._questions[question_id]
        except KeyError:
            raise QuestionNotFoundError(
                f"Question {question_id!r} not found",
                details={"question_id": question_id},
            ) from None

    def list_questions(self) -> list[Question]:
        return sorted(self._questions.values(), key=lambda q: q.created_at, reverse=True)

    def increment_interview_count(self, question_id: str, delta: int = 1) -> int:
        question = self.get(question_id)
        question.interview_count += delta
        return question.interview_count

    def update_answer(self, question_id: str, answer: str) -> None:
        question = self.get(question_id)
        question.answer = answer.strip() or None
        question.is_user_answered = True

    def get_resume(self) -> Optional[str]:
        return self._resume

    def save_resume(self, content: str) -> None:
        self._resume = content
