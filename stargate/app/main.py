"""
Application principale FastAPI.

Ce module assemble tous les composants de l'API de suivi des affectations : logging, conteneur,
middlewares, gestionnaires d'erreurs et routes.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Créer le schéma si demandé (démo/tests; Alembic sinon)
- Ajouter les middlewares (request id, timing, métriques)
- Monter les routers (santé, personnes, affectations, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI

from stargate.api.errors import register_error_handlers
from stargate.api.routes_duty import router as duty_router
from stargate.api.routes_health import router as health_router
from stargate.api.routes_person import router as person_router
from stargate.app.metrics import PrometheusMiddleware, metrics_router
from stargate.core.container import Container
from stargate.core.logging import setup_logging
from stargate.middlewares.request_id import RequestIDMiddleware
from stargate.middlewares.timing import TimingMiddleware


def create_app(container: Container | None = None) -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Attache le conteneur (stockage + services) à `app.state`
    - Ajoute les middlewares utiles au debug/traçabilité
    - Publie les routes
    """
    if container is None:
        from stargate.core.container import container as default_container  # noqa: PLC0415

        container = default_container
    settings = container.settings
    setup_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
    if settings.DB_AUTO_CREATE:
        container.init_schema()

    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.state.container = container
    # Le dernier middleware ajouté est le plus externe: le request id enveloppe le reste
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(person_router)
    app.include_router(duty_router)
    app.include_router(metrics_router)
    return app


app = create_app()
