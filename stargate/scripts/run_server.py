"""
Script de lancement du serveur HTTP.

Lit l'hôte et le port depuis les settings (APP_HOST/APP_PORT) et sert l'application avec uvicorn.
"""

import uvicorn

from stargate.core.settings import get_settings


def main() -> None:
    """Point d'entrée principal: lance uvicorn sur `stargate.app.main:app`."""
    settings = get_settings()
    uvicorn.run(
        "stargate.app.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=False,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
