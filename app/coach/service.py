from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from app.coach.context import build_context_snapshot
from app.coach.prompt import COACH_PERSONA_PROMPT, compose_messages
from app.coach.schemas import CoachingRequest, CoachReply

logger = logging.getLogger("app.coach")

STUB_REPLY = (
    "Personalized coaching is unavailable until the coaching service is configured; "
    "please ask your program administrator to finish the setup. In the meantime, one "
    "useful next step: list the three people whose expectations matter most to your "
    "first 90 days and book a short conversation with each of them this week."
)

EMPTY_REPLY_FALLBACK = "I'm having trouble formulating a response right now."


class LLMClient(Protocol):
    async def complete(
        self,
        *,
        messages: Sequence[dict[str, str]],
        max_tokens: int,
        temperature: float,
    ) -> str: ...


class CoachUpstreamError(Exception):
    """Raised when the completion service fails; the cause is chained for server logs."""


class CoachService:
    def __init__(
        self,
        *,
        llm_client: LLMClient | None,
        max_tokens: int,
        temperature: float,
        request_id: str | None = None,
    ):
        self._llm = llm_client
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._request_id = request_id

    async def generate_reply(self, coaching_request: CoachingRequest) -> CoachReply:
        snapshot = build_context_snapshot(coaching_request.profile)
        messages = compose_messages(
            persona=COACH_PERSONA_PROMPT,
            snapshot=snapshot,
            meta=coaching_request.meta,
            prompt=coaching_request.prompt,
        )

        if self._llm is None:
            return CoachReply(mode="stub", reply=STUB_REPLY)

        try:
            text = await self._llm.complete(
                messages=[m.model_dump() for m in messages],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except Exception as exc:  # noqa: BLE001 - any upstream failure maps to one generic error
            # Diagnostics stay server-side; never log prompt/profile content.
            logger.warning(
                "Coach completion failed",
                exc_info=True,
                extra={
                    "request_id": self._request_id,
                    "error_type": type(exc).__name__,
                    "success": False,
                },
            )
            raise CoachUpstreamError("Coach completion failed") from exc

        reply = (text or "").strip() or EMPTY_REPLY_FALLBACK
        return CoachReply(mode="openai", reply=reply)
