"""
Moteur de règles du cycle de vie des affectations.

Règles appliquées
-----------------
- Une personne n'a jamais plus d'une affectation ouverte (sans date de fin).
- Une nouvelle affectation démarre strictement après l'affectation ouverte, qui est alors close la
  veille du nouveau démarrage.
- La projection `AstronautDetail` (titre, grade, début/fin de carrière) est recalculée à chaque
  écriture; le début de carrière est la plus ancienne date de début d'affectation.
- Le titre "RETIRED" est terminal: la fin de carrière est la veille du départ.

Le moteur ne fait que modifier/stager des enregistrements via le dépôt; le commit appartient à
l'appelant (UnitOfWork).
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

import structlog

from stargate.domain.entities import RETIRED_TITLE, truncate_to_date
from stargate.domain.errors import InvalidArgumentError, InvalidOrderingError, NotFoundError

log = structlog.get_logger(__name__)

ONE_DAY = timedelta(days=1)


def _require_person(person: Any) -> None:
    if person is None:
        raise InvalidArgumentError("Person is required")
    if person.id is None or person.id <= 0:
        raise InvalidArgumentError("Person id must be greater than zero")


def _require_text(value: str | None, field: str) -> None:
    if value is None or not value.strip():
        raise InvalidArgumentError(f"'{field}' cannot be null or empty")


class DutyRulesEngine:
    """Logique métier pure au-dessus d'un `DutyTimelineStore`.

    Paramètres:
    - store: dépôt exposant lecture ponctuelle/ordonnée, agrégat min et staging.
    """

    def __init__(self, store) -> None:  # type: ignore[no-untyped-def]
        self.store = store

    def latest_open_duty(self, person_id: int):  # type: ignore[no-untyped-def]
        """Retourne l'affectation ouverte la plus récente, ou None."""
        return self.store.latest_open_duty(person_id)

    def close_open_duty(self, person_id: int, new_start_date: date):  # type: ignore[no-untyped-def]
        """Clôt l'affectation ouverte la veille de `new_start_date`.

        Retour: l'affectation close, ou None s'il s'agit de la première affectation.

        Raises:
            InvalidOrderingError: l'affectation ouverte ne démarre pas avant `new_start_date`.
        """
        new_start_date = truncate_to_date(new_start_date)
        open_duty = self.latest_open_duty(person_id)
        if open_duty is None:
            return None
        if open_duty.duty_start_date >= new_start_date:
            raise InvalidOrderingError(
                "Duty start date must be after the start date of the current duty "
                f"({open_duty.duty_start_date.isoformat()})"
            )
        open_duty.duty_end_date = new_start_date - ONE_DAY
        self.store.stage(open_duty)
        log.debug(
            "duty_closed",
            person_id=person_id,
            duty_id=open_duty.id,
            duty_end_date=open_duty.duty_end_date.isoformat(),
        )
        return open_duty

    def upsert_detail(self, person, duty_title: str, rank: str, duty_start_date: date):  # type: ignore[no-untyped-def]
        """Crée ou met à jour la projection de carrière de `person`.

        - Première affectation: projection créée à partir des arguments.
        - Sinon: début de carrière recalculé sur l'historique, titre/grade écrasés et fin de
          carrière effacée.
        """
        _require_person(person)
        _require_text(duty_title, "duty_title")
        _require_text(rank, "rank")
        duty_start_date = truncate_to_date(duty_start_date)

        detail = self.store.get_detail(person.id)
        if detail is None:
            detail = self.store.add_detail(
                person_id=person.id,
                current_duty_title=duty_title,
                current_rank=rank,
                career_start_date=duty_start_date,
            )
            log.debug("detail_created", person_id=person.id)
            return detail

        earliest = self.store.min_duty_start_date(person.id)
        candidates = [d for d in (earliest, duty_start_date) if d is not None]
        detail.career_start_date = min(candidates)
        detail.current_duty_title = duty_title
        detail.current_rank = rank
        detail.career_end_date = None
        self.store.stage(detail)
        log.debug("detail_updated", person_id=person.id)
        return detail

    def retire(self, person, duty_start_date: date, rank: str):  # type: ignore[no-untyped-def]
        """Transition terminale vers la retraite.

        Retour: la nouvelle affectation "RETIRED" (ouverte).

        Raises:
            NotFoundError: aucune projection (donc aucune affectation) à clore.
            InvalidOrderingError: même règle d'ordre que `close_open_duty`.
        """
        _require_person(person)
        _require_text(rank, "rank")
        duty_start_date = truncate_to_date(duty_start_date)

        detail = self.store.get_detail(person.id)
        if detail is None:
            raise NotFoundError("No active astronaut duty found to retire")

        # Validation d'ordre avant toute modification de la projection
        self.close_open_duty(person.id, duty_start_date)

        detail.current_duty_title = RETIRED_TITLE
        detail.current_rank = rank
        detail.career_end_date = duty_start_date - ONE_DAY
        self.store.stage(detail)

        duty = self.store.add_duty(
            person_id=person.id,
            rank=rank,
            duty_title=RETIRED_TITLE,
            duty_start_date=duty_start_date,
        )
        log.debug(
            "person_retired",
            person_id=person.id,
            career_end_date=detail.career_end_date.isoformat(),
        )
        return duty
