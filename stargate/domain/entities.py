"""
Entités du domaine métier.

Ce module définit les commandes et les vues manipulées par le moteur de règles, le workflow de
création d'affectation et la surface de lecture.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

RETIRED_TITLE = "RETIRED"


class DutyKind(str, Enum):
    """Issue d'une nouvelle affectation: départ à la retraite ou affectation régulière."""

    RETIREMENT = "retirement"
    ASSIGNMENT = "assignment"


def classify_duty(duty_title: str) -> DutyKind:
    """Sélectionne la branche du workflow (comparaison insensible à la casse)."""
    if duty_title.strip().upper() == RETIRED_TITLE:
        return DutyKind.RETIREMENT
    return DutyKind.ASSIGNMENT


def truncate_to_date(value: object) -> object:
    """Ramène un datetime (objet ou chaîne ISO) à sa date; laisse le reste à Pydantic."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > len("YYYY-MM-DD"):
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return value


class CreateDutyCommand(BaseModel):
    """Demande d'affectation d'une personne (identifiée par son nom)."""

    name: str
    rank: str
    duty_title: str
    duty_start_date: date

    @field_validator("duty_start_date", mode="before")
    @classmethod
    def truncate_start_date(cls, value: object) -> object:
        return truncate_to_date(value)


class CreateDutyResult(BaseModel):
    """Résultat du workflow: id de la nouvelle affectation (None pour une retraite)."""

    id: int | None
    outcome: DutyKind


class PersonView(BaseModel):
    """Personne et sa projection de carrière (champs vides sans affectation)."""

    model_config = ConfigDict(from_attributes=True)

    person_id: int
    name: str
    current_rank: str | None = None
    current_duty_title: str | None = None
    career_start_date: date | None = None
    career_end_date: date | None = None


class DutyView(BaseModel):
    """Affectation telle qu'exposée en lecture."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    person_id: int
    rank: str
    duty_title: str
    duty_start_date: date
    duty_end_date: date | None = None


class PersonDuties(BaseModel):
    """Personne et son historique chronologique d'affectations."""

    person: PersonView
    duties: list[DutyView]
