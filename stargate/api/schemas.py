# Schémas Pydantic exposés par l'API (requêtes et réponses).

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, field_validator

from stargate.core.http_constants import HTTP_OK
from stargate.domain.entities import DutyKind, DutyView, PersonView, truncate_to_date


class BaseResponse(BaseModel):
    """Champs communs à toutes les réponses.

    Champs:
    - success: bool
    - message: str
    - response_code: int (statut HTTP renvoyé)
    """

    success: bool = True
    message: str = "Successful"
    response_code: int = HTTP_OK


class CreateDutyRequest(BaseModel):
    """Requête de création d'affectation.

    Champs:
    - name: str (nom exact de la personne)
    - rank: str
    - duty_title: str ("RETIRED" déclenche la retraite)
    - duty_start_date: date (YYYY-MM-DD; une heure éventuelle est ignorée)
    """

    name: str
    rank: str
    duty_title: str
    duty_start_date: date

    @field_validator("duty_start_date", mode="before")
    @classmethod
    def truncate_start_date(cls, value: object) -> object:
        return truncate_to_date(value)


class IdResponse(BaseResponse):
    """Réponse d'écriture portant l'identifiant créé/modifié."""

    id: int | None = None


class CreateDutyResponse(IdResponse):
    """Réponse de création d'affectation (`id` nul pour une retraite)."""

    outcome: DutyKind


class PersonResponse(BaseResponse):
    """Une personne et sa projection courante."""

    person: PersonView


class PeopleResponse(BaseResponse):
    """Toutes les personnes et leur projection."""

    people: list[PersonView]


class DutiesResponse(BaseResponse):
    """Une personne et son historique chronologique d'affectations."""

    person: PersonView
    astronaut_duties: list[DutyView]
