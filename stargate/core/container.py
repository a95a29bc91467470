"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, moteur SQL, fabrique de sessions, services métier)
et expose un singleton `container` utilisé par l'application par défaut.
"""

from __future__ import annotations

from threading import Lock

from sqlalchemy import text
from sqlalchemy.pool import StaticPool

from stargate.core.settings import Settings, get_settings
from stargate.domain.duty_workflow import DutyWorkflow
from stargate.domain.people import PersonRegistry
from stargate.domain.queries import PeopleQueries
from stargate.infra.repo.db import get_engine, get_session_factory
from stargate.infra.repo.models import Base
from stargate.infra.repo.uow import UnitOfWork


class Container:
    """Assemble le stockage et les services à partir des paramètres."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.engine = get_engine(self.settings.DATABASE_URL, echo=self.settings.DB_ECHO)
        self.session_factory = get_session_factory(self.engine)
        self.storage_backend = self.engine.dialect.name
        # Connexion unique: une seule transaction à la fois
        self._uow_lock = Lock() if isinstance(self.engine.pool, StaticPool) else None
        self.workflow = DutyWorkflow(self.unit_of_work)
        self.queries = PeopleQueries(self.unit_of_work)
        self.registry = PersonRegistry(self.unit_of_work)

    def unit_of_work(self) -> UnitOfWork:
        return UnitOfWork(self.session_factory, lock=self._uow_lock)

    def init_schema(self) -> None:
        """Crée les tables manquantes (démo/tests; Alembic en production)."""
        Base.metadata.create_all(self.engine)

    def ping(self) -> bool:
        """Vérifie que le stockage répond."""
        with self.unit_of_work() as uow:
            uow.session.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.engine.dispose()


container = Container()
