"""Permissive cross-origin headers on every response.

Starlette's CORSMiddleware only answers preflights that carry `Origin` and
`Access-Control-Request-Method`; browser-less callers (curl sanity checks, server-side
proxies) expect the same header set on every response, including errors, so this
middleware stamps it unconditionally.

As the outermost application middleware it is also the last point where an unhandled
exception can still be turned into a regular response. When `error_response` is given,
such exceptions are answered with it (headers included) instead of reaching Starlette's
plain-text 500 handler. Logging of the failure happens in HttpLoggingMiddleware.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        *,
        headers: Mapping[str, str],
        error_response: Callable[[], Response] | None = None,
    ):
        super().__init__(app)
        self._headers = dict(headers)
        self._error_response = error_response

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            response = await call_next(request)
        except Exception:
            if self._error_response is None:
                raise
            response = self._error_response()

        for name, value in self._headers.items():
            response.headers[name] = value
        return response
