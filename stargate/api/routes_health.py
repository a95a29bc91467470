"""
Endpoint de santé pour vérifier la disponibilité de l'API et du stockage.

Expose `/health` pour signaler l'état général de l'application et de la base.
"""

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from stargate.api.deps import get_container
from stargate.core.container import Container
from stargate.core.http_constants import HTTP_OK, HTTP_SERVICE_UNAVAILABLE

router = APIRouter(tags=["health"])
log = structlog.get_logger(__name__)

container_dep = Depends(get_container)


@router.get("/health")
def health(container: Container = container_dep):
    """Vérifie la disponibilité de l'API et le backend de stockage."""
    try:
        container.ping()
        db_ok = True
    except SQLAlchemyError as err:
        log.error("health_storage_unreachable", error=str(err))
        db_ok = False
    return JSONResponse(
        status_code=HTTP_OK if db_ok else HTTP_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if db_ok else "degraded",
            "storage": container.storage_backend,
            "database": db_ok,
        },
    )
