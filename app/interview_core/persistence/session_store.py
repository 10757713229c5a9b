"""
Purpose: Keep unfinished interviews resumable across reloads and crashes.
Why: a mock interview is a long multi-turn conversation; losing it to a
closed tab is the worst possible UX.

What is inside:
- SessionStore: save/load/clear per topic + the single "active" topic.
- ActiveSessionPointer: the one resumable topic id, last write wins.
- SessionManager: owns medium + pointer + store with an explicit lifecycle
  (start at application start, shutdown on exit).

Rules:
- An empty transcript is never written.
- Corrupt or mismatched records read as "no session", never as an error.
- A missing medium, or one raising OSError, turns every call into a no-op.

Testing: InMemoryMedium + fixed clock; FileMedium on tmp_path.
"""

from __future__ import annotations
import json
import time
from pathlib import Path
from typing import Callable, Optional, Union

from ..interfaces import KeyValueMedium
from ..logging_config import get_logger
from ..models import Difficulty, InterviewSession, StoredMessage
from .media import FileMedium, InMemoryMedium

logger = get_logger(__name__)

STORAGE_PREFIX = "interview_session_"
ACTIVE_SESSION_KEY = "interview_session_active_question"


def storage_key(topic_id: str) -> str:
    return f"{STORAGE_PREFIX}{topic_id}"


def _now_ms() -> int:
    return int(time.time() * 1000)


class ActiveSessionPointer:
    """The single resumable topic id, persisted under one fixed key."""

    def __init__(
        self, medium: Optional[KeyValueMedium], key: str = ACTIVE_SESSION_KEY
    ) -> None:
        self.medium = medium
        self.key = key

    def get(self) -> Optional[str]:
        if self.medium is None:
            return None
        try:
            return self.medium.get_item(self.key) or None
        except (OSError, ValueError) as e:
            logger.warning("Failed to read active session pointer: %s", e)
            return None

    def set(self, topic_id: str) -> None:
        if self.medium is None:
            return
        self.medium.set_item(self.key, topic_id)

    def clear(self) -> None:
        if self.medium is None:
            return
        self.medium.remove_item(self.key)

    def clear_if(self, topic_id: str) -> None:
        """Drop the pointer only when it names `topic_id`."""
        if self.get() == topic_id:
            self.clear()


class SessionStore:
    def __init__(
        self,
        medium: Optional[KeyValueMedium],
        pointer: Optional[ActiveSessionPointer] = None,
        *,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.medium = medium
        self.pointer = pointer or ActiveSessionPointer(medium)
        self.clock = clock

    def save(
        self,
        topic_id: str,
        messages: list[StoredMessage],
        difficulty: Optional[Difficulty] = None,
    ) -> None:
        if self.medium is None or not messages:
            return
        session = InterviewSession(
            topic_id=topic_id,
            messages=list(messages),
            difficulty=difficulty,
            saved_at=self.clock(),
        )
        try:
            self.medium.set_item(
                storage_key(topic_id), json.dumps(session.to_dict(), ensure_ascii=False)
            )
            self.pointer.set(topic_id)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to save interview session %s: %s", topic_id, e)

    def load(self, topic_id: str) -> Optional[InterviewSession]:
        if self.medium is None:
            return None
        try:
            raw = self.medium.get_item(storage_key(topic_id))
        except (OSError, ValueError) as e:
            logger.warning("Failed to read interview session %s: %s", topic_id, e)
            return None
        if not raw:
            return None

        try:
            data = json.loads(raw)
            if not isinstance(data, dict) or data.get("topic_id") != topic_id:
                raise ValueError("record does not belong to this topic")
            messages = data.get("messages")
            if not isinstance(messages, list) or not messages:
                raise ValueError("record has no messages")
            parsed = [StoredMessage.from_dict(m) for m in messages]
            saved_at = data.get("saved_at")
            if not isinstance(saved_at, int) or isinstance(saved_at, bool):
                saved_at = 0
        except ValueError as e:
            logger.warning("Discarding corrupt interview session %s: %s", topic_id, e)
            return None

        try:
            difficulty = Difficulty(data.get("difficulty"))
        except ValueError:
            difficulty = None

        return InterviewSession(
            topic_id=topic_id, messages=parsed, difficulty=difficulty, saved_at=saved_at
        )

    def has_session(self, topic_id: str) -> bool:
        return self.load(topic_id) is not None

    def clear(self, topic_id: str) -> None:
        if self.medium is None:
            return
        try:
            self.medium.remove_item(storage_key(topic_id))
            self.pointer.clear_if(topic_id)
        except OSError as e:
            logger.warning("Failed to clear interview session %s: %s", topic_id, e)

    def active_topic_id(self) -> Optional[str]:
        """Pointer value if its record still loads; a dangling pointer is dropped."""
        topic_id = self.pointer.get()
        if topic_id is None:
            return None
        if self.has_session(topic_id):
            return topic_id
        logger.info("Dropping stale active session pointer %s", topic_id)
        try:
            self.pointer.clear()
        except OSError as e:
            logger.warning("Failed to drop stale session pointer: %s", e)
        return None


class SessionManager:
    """
    Application-lifetime owner of the session medium, pointer and store.
    Use as a context manager, or call start()/shutdown() explicitly.
    Before start() and after shutdown() the store has no medium and every
    operation is a no-op.
    """

    def __init__(
        self,
        session_dir: Optional[Union[str, Path]] = None,
        *,
        medium: Optional[KeyValueMedium] = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self.session_dir = session_dir
        self._medium = medium
        self.clock = clock
        self.store = SessionStore(None, clock=clock)

    @property
    def started(self) -> bool:
        return self.store.medium is not None

    def start(self) -> "SessionManager":
        medium = self._medium
        if medium is None:
            if self.session_dir:
                try:
                    medium = FileMedium(self.session_dir)
                except OSError as e:
                    logger.warning(
                        "Session directory %s unusable, sessions will not persist: %s",
                        self.session_dir,
                        e,
                    )
                    medium = None
            else:
                medium = InMemoryMedium()
        self.store = SessionStore(
            medium, ActiveSessionPointer(medium), clock=self.clock
        )
        logger.debug("Session manager started with %s", type(medium).__name__)
        return self

    def shutdown(self) -> None:
        self.store = SessionStore(None, clock=self.clock)

    def __enter__(self) -> "SessionManager":
        return self.start()

    def __exit__(self, *exc) -> None:
        self.shutdown()
