from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from app.coach.envelope import reply_response, upstream_error_response
from app.coach.schemas import CoachHealthOut, ResponseEnvelope
from app.coach.service import CoachService, CoachUpstreamError
from app.coach.validation import parse_coaching_request
from app.core.llm.deps import get_openai_client
from app.core.metrics import coach_replies_total
from app.core.settings import get_settings

router = APIRouter(prefix="/coach", tags=["coach"])
logger = logging.getLogger("app.coach")


@router.get("", response_model=CoachHealthOut, summary="Coach liveness check")
async def coach_health() -> CoachHealthOut:
    return CoachHealthOut(ok=True, message="Coach API is alive")


@router.options("", status_code=status.HTTP_204_NO_CONTENT, include_in_schema=False)
async def coach_preflight() -> Response:
    # CORS headers are attached to every response by CorsHeadersMiddleware.
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "",
    response_model=ResponseEnvelope,
    response_model_exclude_none=True,
    summary="Request a coaching reply",
    responses={
        400: {"model": ResponseEnvelope, "description": "Invalid body or missing prompt."},
        500: {"model": ResponseEnvelope, "description": "Completion service failed."},
    },
)
async def coach(
    request: Request,
    openai_client=Depends(get_openai_client),
) -> JSONResponse:
    """
    Produce one coaching reply for a prompt and consent-gated learner profile.

    IMPORTANT (privacy):
    - The body is read raw and validated here so malformed JSON yields the 400 envelope.
    - Prompts, profiles and model output are never logged or stored.
    - At most one upstream call per request; no retries.
    """

    # CoachRequestError propagates to the registered exception handler (400 envelope).
    coaching_request = parse_coaching_request(await request.body())

    settings = get_settings()
    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")
    svc = CoachService(
        llm_client=openai_client,
        max_tokens=settings.coach_max_tokens,
        temperature=settings.coach_temperature,
        request_id=request_id,
    )

    try:
        reply = await svc.generate_reply(coaching_request)
    except CoachUpstreamError:
        coach_replies_total.labels(mode="error").inc()
        logger.info(
            "Coach reply failed",
            extra={"request_id": request_id, "coach_mode": "error", "success": False},
        )
        return upstream_error_response()

    coach_replies_total.labels(mode=reply.mode).inc()
    logger.info(
        "Coach reply generated",
        extra={"request_id": request_id, "coach_mode": reply.mode, "success": True},
    )
    return reply_response(reply)
