"""Configuration de test pour pytest avec gestion des chemins.

Ce module ajoute la racine du projet au sys.path (imports `stargate...` et `scripts...`) et fournit
un conteneur branché sur une base SQLite en mémoire, isolée pour chaque test.
"""

from __future__ import annotations

import os
import sys
from datetime import date

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so that
# imports like `from stargate...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from stargate.app.main import create_app  # noqa: E402
from stargate.core.container import Container  # noqa: E402
from stargate.core.settings import Settings  # noqa: E402
from stargate.domain.entities import CreateDutyCommand  # noqa: E402


@pytest.fixture()
def settings() -> Settings:
    """Paramètres de test: SQLite mémoire, schéma créé au démarrage."""
    return Settings(
        DATABASE_URL="sqlite+pysqlite:///:memory:",
        DB_AUTO_CREATE=True,
        LOG_LEVEL="WARNING",
        APP_NAME="stargate-test",
    )


@pytest.fixture()
def container(settings: Settings):
    """Conteneur isolé (une base mémoire par test)."""
    c = Container(settings)
    c.init_schema()
    yield c
    c.dispose()


@pytest.fixture()
def session(container: Container):
    """Session brute pour les tests du dépôt et du moteur de règles."""
    s = container.session_factory()
    yield s
    s.rollback()
    s.close()


@pytest.fixture()
def client(container: Container) -> TestClient:
    """Client HTTP sur une application branchée sur le conteneur de test."""
    return TestClient(create_app(container))


@pytest.fixture()
def duty():
    """Fabrique de commandes d'affectation."""

    def _make(
        name: str = "John Doe",
        duty_title: str = "Commander",
        rank: str = "1LT",
        start: date | str = date(2023, 1, 1),
    ) -> CreateDutyCommand:
        return CreateDutyCommand(
            name=name, rank=rank, duty_title=duty_title, duty_start_date=start
        )

    return _make
