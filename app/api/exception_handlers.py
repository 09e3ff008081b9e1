from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.coach.envelope import client_error_response
from app.domain.exceptions import CoachRequestError

logger = logging.getLogger("app.request_validation")


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers."""

    @app.exception_handler(CoachRequestError)
    async def handle_coach_request_error(
        request: Request,
        exc: CoachRequestError,
    ) -> JSONResponse:
        # Client errors are not server faults: INFO level, and never the body itself.
        request_id = getattr(request.state, "request_id", None) or request.headers.get(
            "X-Request-ID"
        )
        logger.info(
            "Coach request rejected",
            extra={
                "request_id": request_id,
                "http_method": request.method,
                "request_path": request.url.path,  # no query string
                "status_code": 400,
                "error_type": type(exc).__name__,
            },
        )
        return client_error_response(exc.message)
