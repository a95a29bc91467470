"""Unit of Work: une transaction par opération métier.

Usage:
    with UnitOfWork(session_factory) as uow:
        person = uow.store.get_person_by_name("John Doe")
        ...
        uow.commit()

Sans appel explicite à `commit()`, la sortie du bloc annule tout ce qui a été stagé
(erreur de validation, annulation de la requête, exception quelconque). Une violation
d'unicité, au flush ou au commit, remonte en `ConflictError`.

Avec `lock`, les unités de travail sont sérialisées du début à la fin du bloc: c'est le cas
d'une base SQLite en mémoire, où toutes les sessions partagent la même connexion et donc la même
transaction.
"""

from __future__ import annotations

from threading import Lock

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from stargate.domain.errors import ConflictError

from .duty_store import DutyTimelineStore

log = structlog.get_logger(__name__)


class UnitOfWork:
    """Délimite une transaction SQLAlchemy et expose le dépôt associé."""

    def __init__(self, session_factory: sessionmaker, lock: Lock | None = None) -> None:
        self._session_factory = session_factory
        self._lock = lock
        self._session: Session | None = None
        self.store: DutyTimelineStore | None = None

    def __enter__(self) -> UnitOfWork:
        if self._lock is not None:
            self._lock.acquire()
        self._session = self._session_factory()
        self.store = DutyTimelineStore(self._session)
        return self

    def _release(self) -> None:
        if self._lock is not None:
            self._lock.release()

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[no-untyped-def]
        try:
            if self._session is not None and self._session.in_transaction():
                self._session.rollback()
        finally:
            if self._session is not None:
                self._session.close()
            self._session = None
            self.store = None
            self._release()
        # Un autoflush peut violer une contrainte avant le commit explicite
        if isinstance(exc, IntegrityError):
            log.warning("flush_integrity_conflict", error=str(exc.orig))
            raise ConflictError(
                "Conflicting write: the record already exists or changed"
            ) from exc

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("Session not available. Use 'with UnitOfWork(...) as uow:'.")
        return self._session

    def commit(self) -> None:
        """Valide atomiquement tous les enregistrements stagés.

        Raises:
            ConflictError: violation d'unicité (doublon ou écriture concurrente).
        """
        try:
            self.session.commit()
        except IntegrityError as err:
            self.session.rollback()
            log.warning("commit_integrity_conflict", error=str(err.orig))
            raise ConflictError("Conflicting write: the record already exists or changed") from err

    def rollback(self) -> None:
        self.session.rollback()
