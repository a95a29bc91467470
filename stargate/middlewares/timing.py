"""Middleware Starlette de chronométrage des requêtes.

Pose l'en-tête X-Process-Time-ms et journalise chaque requête. Au-delà du seuil `slow_ms`,
l'événement passe en warning (écritures d'affectation bloquées sur un verrou, par exemple).
"""

import time
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

log = structlog.get_logger(__name__)

SLOW_REQUEST_MS = 500


class TimingMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        header_name: str = "X-Process-Time-ms",
        slow_ms: int = SLOW_REQUEST_MS,
    ) -> None:
        super().__init__(app)
        self.header_name = header_name
        self.slow_ms = slow_ms

    async def dispatch(self, request, call_next: Callable):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        response.headers[self.header_name] = str(elapsed_ms)
        slow = elapsed_ms >= self.slow_ms
        (log.warning if slow else log.info)(
            "request_slow" if slow else "request_completed",
            status_code=response.status_code,
            duration_ms=elapsed_ms,
        )
        return response
