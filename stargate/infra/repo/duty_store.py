# ============================================================
# Module : stargate/infra/repo/duty_store.py
# Objet  : Accès SQL pour Person / AstronautDuty / AstronautDetail.
# Notes  : les écritures sont seulement "stagées" dans la session;
#          le commit appartient à l'UnitOfWork.
# ============================================================

from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import AstronautDetailORM, AstronautDutyORM, PersonORM


class DutyTimelineStore:
    """Dépôt des personnes, affectations et projections de carrière."""

    def __init__(self, session: Session) -> None:
        """Construit le repo avec une session (SQLAlchemy)."""
        self._session = session

    # -- personnes -------------------------------------------------------

    def get_person(self, person_id: int) -> PersonORM | None:
        return self._session.get(PersonORM, person_id)

    def get_person_by_name(self, name: str) -> PersonORM | None:
        """Recherche exacte par nom (sensible à la casse)."""
        stmt = select(PersonORM).where(PersonORM.name == name)
        return self._session.execute(stmt).scalars().first()

    def list_people(self) -> list[tuple[PersonORM, AstronautDetailORM | None]]:
        """Retourne toutes les personnes avec leur projection (jointure externe)."""
        stmt = (
            select(PersonORM, AstronautDetailORM)
            .outerjoin(AstronautDetailORM, AstronautDetailORM.person_id == PersonORM.id)
            .order_by(PersonORM.id)
        )
        return [(row[0], row[1]) for row in self._session.execute(stmt).all()]

    def add_person(self, name: str) -> PersonORM:
        person = PersonORM(name=name)
        self._session.add(person)
        self._session.flush()
        return person

    # -- affectations ----------------------------------------------------

    def latest_open_duty(self, person_id: int) -> AstronautDutyORM | None:
        """Affectation sans date de fin la plus récente (start desc, id desc)."""
        stmt = (
            select(AstronautDutyORM)
            .where(
                AstronautDutyORM.person_id == person_id,
                AstronautDutyORM.duty_end_date.is_(None),
            )
            .order_by(AstronautDutyORM.duty_start_date.desc(), AstronautDutyORM.id.desc())
            .limit(1)
        )
        return self._session.execute(stmt).scalars().first()

    def duties_for_person(self, person_id: int) -> list[AstronautDutyORM]:
        """Historique chronologique (start asc) d'une personne."""
        stmt = (
            select(AstronautDutyORM)
            .where(AstronautDutyORM.person_id == person_id)
            .order_by(AstronautDutyORM.duty_start_date.asc(), AstronautDutyORM.id.asc())
        )
        return list(self._session.execute(stmt).scalars().all())

    def min_duty_start_date(self, person_id: int) -> date | None:
        stmt = select(func.min(AstronautDutyORM.duty_start_date)).where(
            AstronautDutyORM.person_id == person_id
        )
        return self._session.execute(stmt).scalar()

    def find_duty(
        self, duty_title: str, duty_start_date: date, person_id: int | None = None
    ) -> AstronautDutyORM | None:
        """Cherche une affectation (titre, date de début), éventuellement pour une personne."""
        stmt = select(AstronautDutyORM).where(
            AstronautDutyORM.duty_title == duty_title,
            AstronautDutyORM.duty_start_date == duty_start_date,
        )
        if person_id is not None:
            stmt = stmt.where(AstronautDutyORM.person_id == person_id)
        return self._session.execute(stmt.limit(1)).scalars().first()

    def add_duty(
        self,
        person_id: int,
        rank: str,
        duty_title: str,
        duty_start_date: date,
        duty_end_date: date | None = None,
    ) -> AstronautDutyORM:
        duty = AstronautDutyORM(
            person_id=person_id,
            rank=rank,
            duty_title=duty_title,
            duty_start_date=duty_start_date,
            duty_end_date=duty_end_date,
        )
        self._session.add(duty)
        return duty

    # -- projection ------------------------------------------------------

    def get_detail(self, person_id: int) -> AstronautDetailORM | None:
        stmt = select(AstronautDetailORM).where(AstronautDetailORM.person_id == person_id)
        return self._session.execute(stmt).scalars().first()

    def add_detail(
        self,
        person_id: int,
        current_duty_title: str,
        current_rank: str,
        career_start_date: date,
        career_end_date: date | None = None,
    ) -> AstronautDetailORM:
        detail = AstronautDetailORM(
            person_id=person_id,
            current_duty_title=current_duty_title,
            current_rank=current_rank,
            career_start_date=career_start_date,
            career_end_date=career_end_date,
        )
        self._session.add(detail)
        return detail

    def stage(self, record: object) -> None:
        """Marque un enregistrement modifié pour le prochain commit."""
        self._session.add(record)

    def flush(self) -> None:
        self._session.flush()
