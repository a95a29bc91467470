"""Registre des personnes: enregistrement et renommage."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from stargate.app.metrics import PEOPLE_REGISTERED
from stargate.domain.errors import ConflictError, InvalidArgumentError, NotFoundError

log = structlog.get_logger(__name__)


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidArgumentError("Name cannot be empty.")
    return cleaned


class PersonRegistry:
    """Écritures sur l'identité des personnes (nom unique)."""

    def __init__(self, uow_factory: Callable) -> None:
        self.uow_factory = uow_factory

    def register(self, name: str) -> int:
        """Enregistre une personne et retourne son id.

        Raises:
            InvalidArgumentError: nom vide.
            ConflictError: nom déjà utilisé.
        """
        cleaned = _clean_name(name)
        with self.uow_factory() as uow:
            if uow.store.get_person_by_name(cleaned) is not None:
                raise ConflictError(f"Person with name {cleaned} already exists")
            person = uow.store.add_person(cleaned)
            uow.commit()
            person_id = person.id
        PEOPLE_REGISTERED.inc()
        log.info("person_registered", person_id=person_id, name=cleaned)
        return person_id

    def rename(self, name: str, new_name: str) -> int:
        """Renomme une personne existante; seul attribut modifiable de l'identité."""
        cleaned = _clean_name(new_name)
        with self.uow_factory() as uow:
            person = uow.store.get_person_by_name(name)
            if person is None:
                raise NotFoundError(f"Person with name {name} not found")
            if cleaned != person.name and uow.store.get_person_by_name(cleaned) is not None:
                raise ConflictError(f"Person with name {cleaned} already exists")
            person.name = cleaned
            uow.store.stage(person)
            uow.commit()
            person_id = person.id
        log.info("person_renamed", person_id=person_id, old_name=name, new_name=cleaned)
        return person_id
