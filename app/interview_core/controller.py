"""
Purpose: The single orchestration point for a practice session. Owns the
transcript of the question being practiced, the resumable-session store and
token counters. Prevents any UI from knowing how prompts/LLM/services work.

Key responsibilities:
- Generate question drafts from the resume and save the chosen ones.
- Open an interview on one question, resuming a stored transcript if any.
- chat_once: append the candidate turn, ask the interviewer, persist the
  transcript after every turn.
- conclude: ask for the review report, count the interview, drop the stored
  session. On failure the interview is reopened so it can be retried.
- Track token usage from generator meta.

Testing: Pure unit tests with fakes: fake LLMClient, InMemoryQuestionRepository,
SessionManager over InMemoryMedium.
"""

from __future__ import annotations
import uuid
from typing import Optional

from .config import AppConfig
from .errors import InvalidInputError
from .interfaces import LLMClient, PromptFactory, QuestionRepository
from .logging_config import get_logger, setup_logging
from .models import (
    Difficulty,
    ExtractionResult,
    GeneratedQuestion,
    InterviewReport,
    LLMSettings,
    MessageRole,
    Question,
    StoredMessage,
)
from .persistence.session_store import SessionManager, SessionStore
from .prompts import DefaultPromptFactory
from .prompts.interview import is_interview_over
from .services.llm_openai import OpenAILLMClient
from .services.question_generator import (
    generate_questions_llm,
    save_generated_questions,
)
from .services.report_generator import generate_interview_report

logger = get_logger(__name__)


class InterviewSessionController:
    def __init__(
        self,
        llm: LLMClient,
        repo: QuestionRepository,
        sessions: SessionManager,
        *,
        settings: LLMSettings,
        prompts: Optional[PromptFactory] = None,
    ):
        self.llm: LLMClient = llm
        self.repo: QuestionRepository = repo
        self.sessions = sessions
        self.settings = settings
        self.prompts: PromptFactory = prompts or DefaultPromptFactory()

        self.topic_id: Optional[str] = None
        self.difficulty: Optional[Difficulty] = None
        self.messages: list[StoredMessage] = []
        self.concluded: bool = False
        self.interviewer_finished: bool = False
        self.report: Optional[InterviewReport] = None

        self.tokens_in: int = 0
        self.tokens_out: int = 0
        self.model_used: Optional[str] = None

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        repo: QuestionRepository,
        sessions: Optional[SessionManager] = None,
    ) -> "InterviewSessionController":
        setup_logging(config.LOG_LEVEL, config.LOG_DIR)
        if sessions is None:
            sessions = SessionManager(config.SESSION_DIR).start()
        return cls(
            OpenAILLMClient.from_config(config),
            repo,
            sessions,
            settings=config.llm_settings(),
        )

    @property
    def store(self) -> SessionStore:
        return self.sessions.store

    def _account(self, meta: dict) -> None:
        self.tokens_in += int(meta.get("tokens_in", 0))
        self.tokens_out += int(meta.get("tokens_out", 0))
        self.model_used = meta.get("model") or self.settings.model

    # QUESTION BANK
    def generate_questions(
        self, resume_text: Optional[str] = None
    ) -> tuple[ExtractionResult, dict]:
        """Drafts from the given resume, or the stored one when omitted."""
        resume = resume_text if resume_text is not None else self.repo.get_resume()
        result, meta = generate_questions_llm(
            llm=self.llm,
            prompts=self.prompts,
            settings=self.settings,
            resume=resume or "",
        )
        self._account(meta)
        return result, meta

    def save_questions(self, questions: list[GeneratedQuestion]) -> list[Question]:
        return save_generated_questions(self.repo, questions)

    # INTERVIEW
    def resumable_topic(self) -> Optional[str]:
        return self.store.active_topic_id()

    def open_interview(
        self, topic_id: str, difficulty: Optional[Difficulty] = None
    ) -> bool:
        """Start (or resume) the interview for one question. True if resumed."""
        self.repo.get(topic_id)
        self.topic_id = topic_id
        self.concluded = False
        self.interviewer_finished = False
        self.report = None

        session = self.store.load(topic_id)
        if session is None:
            self.messages = []
            self.difficulty = difficulty
            return False

        self.messages = session.messages
        self.difficulty = difficulty or session.difficulty
        logger.info(
            "Resumed interview %s with %d message(s)", topic_id, len(self.messages)
        )
        return True

    def get_history(self) -> list[StoredMessage]:
        return self.messages

    def _require_open(self) -> str:
        if self.topic_id is None:
            raise InvalidInputError("No interview is open.")
        if self.concluded:
            raise InvalidInputError("This interview has already ended.")
        return self.topic_id

    def _append(self, role: MessageRole, text: str) -> StoredMessage:
        msg = StoredMessage.from_text(str(uuid.uuid4()), role, text)
        self.messages.append(msg)
        self.store.save(self.topic_id, self.messages, self.difficulty)
        return msg

    def chat_once(self, user_text: str) -> tuple[str, dict]:
        """
        One candidate turn + interviewer reply. The candidate message is saved
        before the generator is called, so an upstream failure loses nothing.
        """
        topic_id = self._require_open()
        text = (user_text or "").strip()
        if not text:
            raise InvalidInputError("Please enter a non-empty message.")

        self._append(MessageRole.USER, text)

        question = self.repo.get(topic_id)
        system_prompt = self.prompts.build_interviewer_system(
            question=question.content,
            resume=self.repo.get_resume(),
            difficulty=self.difficulty,
        )
        messages = self.prompts.assemble(system=system_prompt, history=self.messages)

        reply, meta = self.llm.chat(messages, self.settings)
        self._append(MessageRole.ASSISTANT, reply)
        self.interviewer_finished = is_interview_over(reply)
        self._account(meta)
        return reply, meta

    def conclude(self) -> InterviewReport:
        """
        End the interview and produce the report. Any failure reopens the
        interview (stored transcript untouched) and propagates.
        """
        topic_id = self._require_open()
        self.concluded = True
        try:
            question = self.repo.get(topic_id)
            report, meta = generate_interview_report(
                llm=self.llm,
                prompts=self.prompts,
                settings=self.settings,
                repo=self.repo,
                question_id=topic_id,
                question_content=question.content,
                messages=self.messages,
            )
        except Exception as e:
            self.concluded = False
            logger.warning("Report generation failed for %s: %s", topic_id, e)
            raise

        self._account(meta)
        self.report = report
        self.store.clear(topic_id)
        return report

    def save_refined_answer(self, answer: Optional[str] = None) -> None:
        """Store the (possibly edited) refined answer as the question's answer."""
        if self.topic_id is None:
            raise InvalidInputError("No interview is open.")
        text = answer if answer is not None else (
            self.report.refined_answer if self.report else ""
        )
        if not text.strip():
            raise InvalidInputError("Refined answer is empty.")
        self.repo.update_answer(self.topic_id, text)

    def abandon(self) -> None:
        """Drop the stored session for the open interview and forget it."""
        if self.topic_id is not None:
            self.store.clear(self.topic_id)
        self.reset()

    def reset(self) -> None:
        self.topic_id = None
        self.difficulty = None
        self.messages = []
        self.concluded = False
        self.interviewer_finished = False
        self.report = None
