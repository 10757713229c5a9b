"""Pytest fixtures for interview_core tests."""
from typing import Optional

import pytest

from interview_core.controller import InterviewSessionController
from interview_core.models import LLMSettings, Question
from interview_core.persistence.media import InMemoryMedium
from interview_core.persistence.question_repository import InMemoryQuestionRepository
from interview_core.persistence.session_store import SessionManager, SessionStore

FIXED_NOW_MS = 1_700_000_000_000


class FakeLLM:
    """Queue of canned replies; an Exception in the queue is raised instead."""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    def queue(self, *replies) -> None:
        self.replies.extend(replies)

    def chat(self, messages, settings, system: Optional[str] = None):
        self.calls.append({"messages": messages, "settings": settings, "system": system})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply, {"model": settings.model, "tokens_in": 10, "tokens_out": 5}


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def medium() -> InMemoryMedium:
    return InMemoryMedium()


@pytest.fixture
def store(medium) -> SessionStore:
    return SessionStore(medium, clock=lambda: FIXED_NOW_MS)


@pytest.fixture
def sessions(medium) -> SessionManager:
    manager = SessionManager(medium=medium, clock=lambda: FIXED_NOW_MS).start()
    yield manager
    manager.shutdown()


@pytest.fixture
def repo() -> InMemoryQuestionRepository:
    repo = InMemoryQuestionRepository()
    repo.add(
        Question(
            id="q1",
            title="冷启动",
            content="在项目冷启动阶段，你是如何获取前 100 个种子用户的？",
            category="故事类",
            difficulty=3,
        )
    )
    repo.save_resume("三年产品经理经验，负责过社区产品从 0 到 1。")
    return repo


@pytest.fixture
def settings() -> LLMSettings:
    return LLMSettings(model="test-model", temperature=0.2, max_tokens=256)


@pytest.fixture
def controller(fake_llm, repo, sessions, settings) -> InterviewSessionController:
    return InterviewSessionController(fake_llm, repo, sessions, settings=settings)
