"""Workflow tests for InterviewSessionController with a fake generator."""
import json

import pytest

from interview_core.config import AppConfig
from interview_core.controller import InterviewSessionController
from interview_core.errors import (
    InvalidInputError,
    QuestionNotFoundError,
    ReportParseError,
    UpstreamError,
)
from interview_core.models import Difficulty, GeneratedQuestion, MessageRole, QuestionSource
from interview_core.persistence.session_store import ACTIVE_SESSION_KEY

REPORT_REPLY = json.dumps(
    {
        "evaluation_expression": "表达清晰",
        "evaluation_content": "缺少数据支撑",
        "refined_answer": "### 1. 场景\n先做种子用户访谈。",
    },
    ensure_ascii=False,
)


def open_with_turn(controller, fake_llm, text="我通过社群运营获取了首批用户。"):
    controller.open_interview("q1", Difficulty.HIGH)
    fake_llm.queue("具体是哪些社群？")
    controller.chat_once(text)


def test_from_config_uses_file_sessions(tmp_path, repo):
    config = AppConfig(
        _env_file=None,
        LLM_API_KEY="sk-test",
        SESSION_DIR=tmp_path / "sessions",
        LOG_DIR=tmp_path / "logs",
    )
    controller = InterviewSessionController.from_config(config, repo=repo)
    assert controller.sessions.started
    assert (tmp_path / "sessions").is_dir()
    assert (tmp_path / "logs").is_dir()
    assert controller.settings.model == config.LLM_MODEL
    controller.sessions.shutdown()


class TestQuestionGeneration:
    def test_uses_stored_resume(self, controller, fake_llm):
        fake_llm.queue('```json\n[{"title": "冷启动", "content": "如何获取首批用户？"}]\n```')
        result, meta = controller.generate_questions()

        assert result.ok
        assert [q.content for q in result.questions] == ["如何获取首批用户？"]
        assert meta["tokens_in"] == 10
        user_prompt = fake_llm.calls[0]["messages"][1]["content"]
        assert "三年产品经理经验" in user_prompt

    def test_missing_resume_never_calls_generator(self, controller, fake_llm, repo):
        repo.save_resume("   ")
        with pytest.raises(InvalidInputError):
            controller.generate_questions()
        assert fake_llm.calls == []

    def test_unusable_reply_is_a_result_not_an_error(self, controller, fake_llm):
        fake_llm.queue("抱歉，我无法完成该请求。")
        result, _ = controller.generate_questions("简历内容")
        assert not result.ok
        assert result.raw_preview == "抱歉，我无法完成该请求。"

    def test_save_questions(self, controller, repo):
        drafts = [
            GeneratedQuestion(
                title="定价", content="你如何定价？", category="战略类", difficulty=4, answer_hint="成本"
            )
        ]
        [saved] = controller.save_questions(drafts)
        assert repo.get(saved.id).source == QuestionSource.AI
        assert saved.answer == "成本"
        assert saved.difficulty == 4

    def test_save_nothing_raises(self, controller):
        with pytest.raises(InvalidInputError):
            controller.save_questions([])


class TestInterview:
    def test_unknown_topic(self, controller):
        with pytest.raises(QuestionNotFoundError):
            controller.open_interview("missing")

    def test_chat_requires_open_interview(self, controller):
        with pytest.raises(InvalidInputError):
            controller.chat_once("hi")

    def test_empty_message_rejected(self, controller, fake_llm):
        controller.open_interview("q1")
        with pytest.raises(InvalidInputError):
            controller.chat_once("   ")
        assert fake_llm.calls == []

    def test_chat_persists_and_points_at_topic(self, controller, fake_llm, medium):
        assert controller.open_interview("q1", Difficulty.HIGH) is False
        fake_llm.queue("具体是哪些社群？")
        reply, _ = controller.chat_once("我通过社群运营获取了首批用户。")

        assert reply == "具体是哪些社群？"
        assert [m.role for m in controller.get_history()] == [
            MessageRole.USER,
            MessageRole.ASSISTANT,
        ]
        assert medium.get_item(ACTIVE_SESSION_KEY) == "q1"
        assert controller.resumable_topic() == "q1"

        sent = fake_llm.calls[0]["messages"]
        assert sent[0]["role"] == "system"
        assert "在项目冷启动阶段" in sent[0]["content"]
        assert "面试强度：高" in sent[0]["content"]
        assert sent[1] == {"role": "user", "content": "我通过社群运营获取了首批用户。"}

    def test_resume_in_new_controller(self, controller, fake_llm, repo, sessions, settings):
        open_with_turn(controller, fake_llm)

        other = InterviewSessionController(fake_llm, repo, sessions, settings=settings)
        assert other.resumable_topic() == "q1"
        assert other.open_interview("q1") is True
        assert len(other.get_history()) == 2
        assert other.difficulty == Difficulty.HIGH

    def test_upstream_failure_keeps_candidate_turn(self, controller, fake_llm, sessions):
        controller.open_interview("q1")
        fake_llm.queue(UpstreamError("boom"))
        with pytest.raises(UpstreamError):
            controller.chat_once("我的回答")

        [msg] = sessions.store.load("q1").messages
        assert msg.role == MessageRole.USER
        assert msg.content == "我的回答"

    def test_interviewer_signals_end(self, controller, fake_llm):
        controller.open_interview("q1")
        fake_llm.queue("好的，面试结束。")
        controller.chat_once("回答完毕")
        assert controller.interviewer_finished

    def test_tokens_accumulate(self, controller, fake_llm):
        open_with_turn(controller, fake_llm)
        fake_llm.queue("还有呢？")
        controller.chat_once("还有线下活动。")
        assert (controller.tokens_in, controller.tokens_out) == (20, 10)
        assert controller.model_used == "test-model"

    def test_abandon_clears_session(self, controller, fake_llm, sessions):
        open_with_turn(controller, fake_llm)
        controller.abandon()
        assert controller.topic_id is None
        assert sessions.store.load("q1") is None
        assert sessions.store.active_topic_id() is None


class TestConclude:
    def test_report_counts_once_and_clears_session(self, controller, fake_llm, repo, sessions):
        open_with_turn(controller, fake_llm)
        fake_llm.queue(REPORT_REPLY)
        report = controller.conclude()

        assert report.evaluation_content == "缺少数据支撑"
        assert controller.report == report
        assert repo.get("q1").interview_count == 1
        assert sessions.store.load("q1") is None
        assert sessions.store.active_topic_id() is None

        report_prompt = fake_llm.calls[-1]["messages"][1]["content"]
        assert "【候选人】" in report_prompt
        assert "【面试官】" in report_prompt

    def test_parse_failure_rolls_back_then_retry_succeeds(self, controller, fake_llm, repo, sessions):
        open_with_turn(controller, fake_llm)
        fake_llm.queue("抱歉，无法生成报告。")
        with pytest.raises(ReportParseError):
            controller.conclude()

        assert not controller.concluded
        assert repo.get("q1").interview_count == 0
        assert sessions.store.load("q1") is not None

        fake_llm.queue(REPORT_REPLY)
        controller.conclude()
        assert repo.get("q1").interview_count == 1

    def test_upstream_failure_rolls_back(self, controller, fake_llm, repo):
        open_with_turn(controller, fake_llm)
        fake_llm.queue(UpstreamError("down"))
        with pytest.raises(UpstreamError):
            controller.conclude()
        assert not controller.concluded
        assert repo.get("q1").interview_count == 0

    def test_empty_transcript(self, controller, fake_llm):
        controller.open_interview("q1")
        with pytest.raises(InvalidInputError):
            controller.conclude()
        assert not controller.concluded
        assert fake_llm.calls == []

    def test_no_chat_after_conclude(self, controller, fake_llm):
        open_with_turn(controller, fake_llm)
        fake_llm.queue(REPORT_REPLY)
        controller.conclude()
        with pytest.raises(InvalidInputError):
            controller.chat_once("再说一句")
        with pytest.raises(InvalidInputError):
            controller.conclude()

    def test_save_refined_answer(self, controller, fake_llm, repo):
        open_with_turn(controller, fake_llm)
        fake_llm.queue(REPORT_REPLY)
        controller.conclude()

        controller.save_refined_answer()
        question = repo.get("q1")
        assert question.answer == "### 1. 场景\n先做种子用户访谈。"
        assert question.is_user_answered

        controller.save_refined_answer("我自己的版本")
        assert repo.get("q1").answer == "我自己的版本"

    def test_save_blank_refined_answer_rejected(self, controller):
        controller.open_interview("q1")
        with pytest.raises(InvalidInputError):
            controller.save_refined_answer()
