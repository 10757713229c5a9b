"""
Purpose: Thin client wrapper around an OpenAI-compatible chat endpoint
(MiniMax by default). One place for auth, retries, model options,
response/usage normalization.

Errors: anything the SDK raises is re-raised as UpstreamError so callers can
tell "unreachable / rejected" apart from "replied unintelligibly".

Testing: Mock SDK calls; assert it maps usage and errors correctly.
"""

from __future__ import annotations
import time
from typing import Optional, Sequence

import openai
from openai import OpenAI

from ..config import DEFAULT_BASE_URL
from ..errors import EmptyReplyError, MissingCredentialError, UpstreamError
from ..logging_config import get_logger
from ..models import LLMSettings

logger = get_logger(__name__)

RETRY_DELAYS = (0.5, 1.0, 2.0, 4.0)
PING_PROMPT = "你好，请用一句话介绍你自己。"

_TRANSIENT = (
    openai.RateLimitError,
    openai.APIConnectionError,  # includes APITimeoutError
    openai.InternalServerError,
)


def _error_code(exc: Exception) -> str:
    if isinstance(exc, openai.AuthenticationError):
        return "UPSTREAM_AUTH"
    if isinstance(exc, openai.RateLimitError):
        return "UPSTREAM_RATE_LIMIT"
    if isinstance(exc, openai.APITimeoutError):
        return "UPSTREAM_TIMEOUT"
    if isinstance(exc, openai.APIConnectionError):
        return "UPSTREAM_CONNECTION"
    if isinstance(exc, openai.APIStatusError):
        return "UPSTREAM_STATUS"
    return "UPSTREAM_ERROR"


class OpenAILLMClient:
    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        *,
        timeout: float = 60.0,
        retry_delays: Sequence[float] = RETRY_DELAYS,
        client=None,
    ):
        self.api_key = (api_key or "").strip()
        if not self.api_key:
            raise MissingCredentialError("请先在设置中配置 API Key")
        self.base_url = (base_url or "").strip() or DEFAULT_BASE_URL
        self.retry_delays = tuple(retry_delays)
        # The SDK retries on its own too; keep that off so back-off lives here.
        self.client = client or OpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=timeout,
            max_retries=0,
        )

    @classmethod
    def from_config(cls, config) -> "OpenAILLMClient":
        return cls(
            api_key=config.LLM_API_KEY,
            base_url=config.LLM_BASE_URL,
            timeout=config.LLM_TIMEOUT,
        )

    def _with_retries(self, fn, *args, **kwargs):
        for delay in self.retry_delays:
            try:
                return fn(*args, **kwargs)
            except _TRANSIENT as e:
                logger.warning(
                    "Transient LLM error (%s), retrying in %.1fs", type(e).__name__, delay
                )
                time.sleep(delay)
        return fn(*args, **kwargs)

    def chat(
        self,
        messages: list[dict[str, str]],
        settings: LLMSettings,
        system: Optional[str] = None,
    ):
        payload = []
        if system:
            payload.append({"role": "system", "content": system})
        payload.extend(messages)

        def call_cc():
            return self.client.chat.completions.create(
                model=settings.model,
                messages=payload,
                temperature=settings.temperature,
                top_p=settings.top_p,
                max_tokens=settings.max_tokens,
            )

        try:
            cc = self._with_retries(call_cc)
        except openai.OpenAIError as e:
            logger.error("LLM call failed: %s", e)
            raise UpstreamError(
                str(e) or type(e).__name__,
                code=_error_code(e),
                details={"model": settings.model, "base_url": self.base_url},
            ) from e

        text = cc.choices[0].message.content if cc.choices else None
        if not text or not text.strip():
            raise EmptyReplyError(
                "AI 未返回有效内容", details={"model": settings.model}
            )
        usage = getattr(cc, "usage", None)
        tokens_in = getattr(usage, "prompt_tokens", 0) if usage else 0
        tokens_out = getattr(usage, "completion_tokens", 0) if usage else 0
        return text, {
            "model": getattr(cc, "model", None) or settings.model,
            "tokens_in": tokens_in or 0,
            "tokens_out": tokens_out or 0,
            "raw": cc,
        }

    def ping(self, settings: LLMSettings) -> str:
        """Connection test: one short greeting round-trip, returns the reply."""
        try:
            text, _ = self.chat([{"role": "user", "content": PING_PROMPT}], settings)
        except EmptyReplyError:
            return "连接成功（无回复内容）"
        return text.strip()
