"""Shared prompt helpers used across prompt modules."""

from __future__ import annotations
from typing import Optional

from ..models import Difficulty, MessageRole, StoredMessage

ROLE_LABELS = {
    MessageRole.USER: "候选人",
    MessageRole.ASSISTANT: "面试官",
}


def difficulty_rules(difficulty: Optional[Difficulty]) -> str:
    if difficulty == Difficulty.LOW:
        return (
            "面试强度：低。\n"
            "- 语气友好，以引导为主，候选人卡住时可以给出提示。\n"
            "- 追问不超过 1 次。\n"
        )
    if difficulty == Difficulty.HIGH:
        return (
            "面试强度：高。\n"
            "- 对每个论断追问数据、细节和取舍依据。\n"
            "- 候选人含糊其辞时直接指出，不给提示。\n"
        )
    return (
        "面试强度：中。\n"
        "- 回答过于简单时追问 1-2 次，聚焦关键细节。\n"
    )


def resume_hint_block(resume: Optional[str], *, max_chars: int = 4000) -> str:
    if resume and resume.strip():
        return resume.strip()[:max_chars]
    return "（无简历）"


def render_transcript(messages: list[StoredMessage]) -> str:
    """
    Render user/assistant turns as the report prompt expects:
    【候选人】 / 【面试官】 headers, blank line between turns.
    System messages and empty turns are skipped.
    """
    blocks: list[str] = []
    for m in messages:
        label = ROLE_LABELS.get(m.role)
        content = m.content.strip()
        if not label or not content:
            continue
        blocks.append(f"【{label}】\n{content}")
    return "\n\n".join(blocks)


def assemble(
    *, system: str, history: list[StoredMessage]
) -> list[dict[str, str]]:
    """System prompt + chat history as plain role/content dicts."""
    out = [{"role": "system", "content": system}]
    for m in history:
        if m.role == MessageRole.SYSTEM:
            continue
        content = m.content
        if content.strip():
            out.append({"role": m.role.value, "content": content})
    return out
