"""Feedback/coaching prompts: the post-interview review report."""

from __future__ import annotations
from textwrap import dedent


def build_report_system() -> str:
    return dedent(
        """\
        你是一位资深面试教练。请根据以下面试对话记录，生成复盘报告。
        必须只返回一个 JSON 对象，不要包含其他文字或 markdown 代码块。

        【refined_answer 字段】请强制按照以下 Markdown 结构输出（不要用纯文本段落）：
        ### 1. 场景 (Situation): 简述背景。
        ### 2. 任务 (Task): 面临的核心挑战是什么。
        ### 3. 行动 (Action): 我具体做了什么（列出 1-2-3 点）。
        ### 4. 结果 (Result): 最终的数据表现或产出。

        【evaluation_content 字段】内容深度点评时，重点点评候选人是否缺少了上述 STAR 环节（场景、任务、行动、结果）中的哪一个，以及覆盖程度如何。

        格式：{"evaluation_expression":"表达技巧点评（语气、逻辑清晰度）","evaluation_content":"内容深度点评（是否覆盖 STAR 各环节、有无亮点）","refined_answer":"基于候选人回答整理润色后的标准答案，第一人称，必须严格按上述 Markdown 结构输出"}
        """
    )


def report_instruction(*, question: str, transcript: str) -> str:
    return f"面试题目：{question}\n\n对话记录：\n{transcript}"
