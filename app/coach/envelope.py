from __future__ import annotations

from fastapi import status
from fastapi.responses import JSONResponse

from app.coach.schemas import CoachReply, ResponseEnvelope

UPSTREAM_ERROR_MESSAGE = "Coach service failed to respond."


def _to_response(envelope: ResponseEnvelope, *, status_code: int) -> JSONResponse:
    # Absent reply/error fields are omitted rather than serialized as null.
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(exclude_none=True),
    )


def reply_response(reply: CoachReply) -> JSONResponse:
    """Live and stub replies share the success status."""
    envelope = ResponseEnvelope(ok=True, mode=reply.mode, reply=reply.reply)
    return _to_response(envelope, status_code=status.HTTP_200_OK)


def error_response(
    message: str, *, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
) -> JSONResponse:
    envelope = ResponseEnvelope(ok=False, mode="error", error=message)
    return _to_response(envelope, status_code=status_code)


def client_error_response(message: str) -> JSONResponse:
    return error_response(message, status_code=status.HTTP_400_BAD_REQUEST)


def upstream_error_response() -> JSONResponse:
    return error_response(UPSTREAM_ERROR_MESSAGE)
