"""
Canonical data shapes, shared truth for typing/validation between layers.

Typical contents:
- LLMSettings (model, temperature, top_p, max_tokens).
- GeneratedQuestion / ExtractionResult (question pipeline output).
- InterviewReport (post-interview review).
- StoredMessage / InterviewSession (resumable transcript).
- Question (question bank row owned by the persistence collaborator).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

UNTITLED_QUESTION = "未命名题目"
DEFAULT_CATEGORY = "其他"
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5


class Difficulty(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class QuestionSource(str, Enum):
    MANUAL = "手动录入"
    AI = "AI生成"


@dataclass
class GeneratedQuestion:
    title: str
    content: str
    category: str = DEFAULT_CATEGORY
    difficulty: int = MIN_DIFFICULTY
    answer_hint: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "category": self.category,
            "difficulty": self.difficulty,
            "answer_hint": self.answer_hint,
        }


@dataclass
class ExtractionResult:
    """
    Outcome of one question-extraction run. Never an exception:
    an empty `questions` list plus `parse_error` is the failure shape.
    """

    questions: list[GeneratedQuestion]
    raw_preview: str
    parse_error: Optional[str] = None
    dropped: int = 0
    strategy: Optional[str] = None

    @property
    def ok(self) -> bool:
        return bool(self.questions)


@dataclass
class InterviewReport:
    evaluation_expression: str = ""
    evaluation_content: str = ""
    refined_answer: str = ""


@dataclass
class MessagePart:
    type: str
    text: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        data["type"] = self.type
        if self.text is not None:
            data["text"] = self.text
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MessagePart":
        if not isinstance(data, dict) or not isinstance(data.get("type"), str):
            raise ValueError("message part must be an object with a string 'type'")
        text = data.get("text")
        if text is not None and not isinstance(text, str):
            raise ValueError("message part 'text' must be a string")
        extra = {k: v for k, v in data.items() if k not in ("type", "text")}
        return cls(type=data["type"], text=text, extra=extra)


@dataclass
class StoredMessage:
    id: str
    role: MessageRole
    parts: list[MessagePart] = field(default_factory=list)

    @classmethod
    def from_text(cls, id: str, role: MessageRole, text: str) -> "StoredMessage":
        return cls(id=id, role=role, parts=[MessagePart(type="text", text=text)])

    @property
    def content(self) -> str:
        """Concatenated text parts, the way the transcript is shown."""
        return "".join(p.text or "" for p in self.parts if p.type == "text")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role": MessageRole(self.role).value,
            "parts": [p.to_dict() for p in self.parts],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoredMessage":
        if not isinstance(data, dict):
            raise ValueError("message must be an object")
        msg_id = data.get("id")
        if not isinstance(msg_id, str):
            raise ValueError("message 'id' must be a string")
        role = MessageRole(data.get("role"))
        parts = data.get("parts")
        if not isinstance(parts, list):
            raise ValueError("message 'parts' must be a list")
        return cls(
            id=msg_id, role=role, parts=[MessagePart.from_dict(p) for p in parts]
        )


@dataclass
class InterviewSession:
    topic_id: str
    messages: list[StoredMessage]
    difficulty: Optional[Difficulty] = None
    saved_at: int = 0  # epoch milliseconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic_id": self.topic_id,
            "messages": [m.to_dict() for m in self.messages],
            "difficulty": self.difficulty.value if self.difficulty else None,
            "saved_at": self.saved_at,
        }


@dataclass
class Question:
    id: str
    title: str
    content: str
    category: str
    difficulty: int = MIN_DIFFICULTY
    answer: Optional[str] = None
    source: QuestionSource = QuestionSource.MANUAL
    interview_count: int = 0
    is_user_answered: bool = False
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class LLMSettings:
    model: str
    temperature: float = 0.7
    top_p: float = 1.0
    max_tokens: int = 2048
