"""
Workflow de création d'affectation.

Enchaînement: validation de la commande -> recherche de la personne -> garde anti-doublon ->
moteur de règles (retraite ou affectation régulière) -> commit unique de tous les enregistrements
modifiés. Toute erreur avant le commit laisse le stockage inchangé.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from stargate.app.metrics import DUTY_ASSIGNMENTS, DUTY_REJECTIONS
from stargate.domain.duty_rules import DutyRulesEngine
from stargate.domain.entities import (
    RETIRED_TITLE,
    CreateDutyCommand,
    CreateDutyResult,
    DutyKind,
    classify_duty,
)
from stargate.domain.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    StargateError,
)

log = structlog.get_logger(__name__)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class DutyWorkflow:
    """Service d'orchestration de la création d'affectations.

    Paramètres:
    - uow_factory: fabrique d'`UnitOfWork` (une transaction par appel).
    """

    def __init__(self, uow_factory: Callable) -> None:
        self.uow_factory = uow_factory

    def validate_and_check_duplicate(self, store, command: CreateDutyCommand):  # type: ignore[no-untyped-def]
        """Pré-conditions, exécutées avant toute modification.

        Retour: la personne désignée par `command.name`.

        Raises:
            InvalidArgumentError: nom, grade ou titre vide.
            NotFoundError: personne inconnue.
            ConflictError: même titre et même date de début déjà enregistrés pour la personne.
        """
        if _is_blank(command.name) or _is_blank(command.rank) or _is_blank(command.duty_title):
            raise InvalidArgumentError("Name, Rank, and DutyTitle are required")

        person = store.get_person_by_name(command.name)
        if person is None:
            raise NotFoundError("Person not found")

        # Une retraite est toujours enregistrée sous le titre canonique
        title = command.duty_title
        if classify_duty(title) is DutyKind.RETIREMENT:
            title = RETIRED_TITLE
        duplicate = store.find_duty(title, command.duty_start_date, person_id=person.id)
        if duplicate is not None:
            raise ConflictError("A duty with the same title and start date already exists")
        return person

    def create_duty(self, command: CreateDutyCommand) -> CreateDutyResult:
        """Crée l'affectation décrite par `command` et met à jour la projection.

        Retour: `CreateDutyResult` (id de la nouvelle affectation, None pour une retraite).
        """
        try:
            with self.uow_factory() as uow:
                person = self.validate_and_check_duplicate(uow.store, command)
                result = self._apply(uow.store, person, command)
                uow.commit()
        except StargateError as err:
            DUTY_REJECTIONS.labels(err.kind.value).inc()
            log.info(
                "duty_rejected",
                name=command.name,
                duty_title=command.duty_title,
                code=err.kind.value,
                reason=err.message,
            )
            raise

        DUTY_ASSIGNMENTS.labels(result.outcome.value).inc()
        log.info(
            "duty_created",
            name=command.name,
            duty_title=command.duty_title,
            duty_start_date=command.duty_start_date.isoformat(),
            outcome=result.outcome.value,
            duty_id=result.id,
        )
        return result

    def _apply(self, store, person, command: CreateDutyCommand) -> CreateDutyResult:  # type: ignore[no-untyped-def]
        # La personne peut avoir disparu entre la validation et l'écriture
        if store.get_person(person.id) is None:
            raise NotFoundError("Person not found")

        rules = DutyRulesEngine(store)
        outcome = classify_duty(command.duty_title)
        if outcome is DutyKind.RETIREMENT:
            rules.retire(person, command.duty_start_date, command.rank)
            store.flush()
            return CreateDutyResult(id=None, outcome=outcome)

        rules.close_open_duty(person.id, command.duty_start_date)
        duty = store.add_duty(
            person_id=person.id,
            rank=command.rank,
            duty_title=command.duty_title,
            duty_start_date=command.duty_start_date,
        )
        rules.upsert_detail(person, command.duty_title, command.rank, command.duty_start_date)
        store.flush()
        return CreateDutyResult(id=duty.id, outcome=outcome)
