from __future__ import annotations

from fastapi import FastAPI

from app.api.exception_handlers import register_exception_handlers
from app.api.schemas import HealthOut
from app.coach.envelope import upstream_error_response
from app.coach.router import router as coach_router
from app.core.logging import setup_logging
from app.core.metrics import PrometheusMetricsMiddleware, metrics_router
from app.core.middleware.cors import CorsHeadersMiddleware
from app.core.middleware.http_logging import HttpLoggingMiddleware
from app.core.settings import get_settings

setup_logging()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Transition Coach API",
        description=(
            "Coaching replies for leaders in their first 90 days.\n\n"
            "Design principles:\n"
            "- Learner profile fields from third-party sources are used only with explicit "
            "consent, and long fields are length-capped.\n"
            "- Without an OpenAI key the service stays up and answers in stub mode.\n"
            "- Every POST /coach outcome uses one envelope: {ok, mode, reply?, error?}.\n"
            "- Logging and metrics avoid learner data by using route templates and metadata only."
        ),
        docs_url="/swagger",
        redoc_url="/docs",
        openapi_tags=[
            {
                "name": "health",
                "description": "Basic uptime check for load balancers and monitoring.",
            },
            {
                "name": "coach",
                "description": "Coaching replies built from a prompt and a consent-gated profile.",
            },
            {
                "name": "metrics",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)
    app.add_middleware(
        CorsHeadersMiddleware,
        headers=settings.cors_headers,
        error_response=upstream_error_response,
    )

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the API process is running.\n\n"
            "It does not contact the completion service."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(coach_router)
    return app


app = create_app()
