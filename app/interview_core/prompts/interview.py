"""Interview/chat prompts (the interviewer bound to one question)"""

from __future__ import annotations
from textwrap import dedent
from typing import Optional

from ..models import Difficulty
from .common import difficulty_rules, resume_hint_block

END_OF_INTERVIEW = "面试结束"

_RULES = dedent(
    """\
    请先让候选人回答问题。如果回答太简单，请进行追问。如果回答偏离，请打断纠正。
    保持对话简洁，不要长篇大论。
    """
)

_SCOPE = (
    "【重要】你必须只针对当前题目进行面试。严禁主动扩展到其他无关题目。"
    f"如果候选人回答完毕且没有追问必要，请直接回复「{END_OF_INTERVIEW}」，不要开启新话题。"
)


def build_interviewer_system(
    *,
    question: str,
    resume: Optional[str],
    difficulty: Optional[Difficulty] = None,
) -> str:
    # Question and resume are user text; keep them out of dedent().
    header = (
        f"你是一个严厉且专业的面试官。当前面试题是：{question.strip() or '（无题目）'}。"
        f"候选人简历：{resume_hint_block(resume)}\n\n"
    )
    return header + _RULES + difficulty_rules(difficulty) + "\n" + _SCOPE


def is_interview_over(reply: str) -> bool:
    """True when the interviewer signalled the end of the round."""
    return END_OF_INTERVIEW in (reply or "")
