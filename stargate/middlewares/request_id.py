"""Middleware Starlette de corrélation des requêtes.

L'identifiant (en-tête entrant ou UUID généré) est:
- posé sur `request.state.trace_id` pour les enveloppes d'erreur,
- lié aux contextvars structlog pour tous les logs de la requête,
- renvoyé dans l'en-tête de réponse.
"""

from collections.abc import Callable
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Corrèle logs, enveloppes d'erreur et réponse autour d'un même identifiant."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request, call_next: Callable):
        trace_id = request.headers.get(self.header_name) or uuid4().hex
        request.state.trace_id = trace_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=trace_id, method=request.method, path=request.url.path
        )
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()
        response.headers[self.header_name] = trace_id
        return response
