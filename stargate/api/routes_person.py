"""
Routes liées aux personnes: liste, lecture par nom, enregistrement et renommage.

Les erreurs métier (`StargateError`) remontent telles quelles et sont traduites en enveloppe
d'erreur par les gestionnaires enregistrés sur l'application.
"""

import structlog
from fastapi import APIRouter, Body, Depends

from stargate.api.deps import get_queries, get_registry
from stargate.api.schemas import IdResponse, PeopleResponse, PersonResponse
from stargate.domain.errors import InvalidArgumentError
from stargate.domain.people import PersonRegistry
from stargate.domain.queries import PeopleQueries

router = APIRouter(prefix="/Person", tags=["person"])
log = structlog.get_logger(__name__)

queries_dep = Depends(get_queries)
registry_dep = Depends(get_registry)
name_body = Body(..., description="Nom de la personne (chaîne JSON)")
new_name_body = Body(..., description="Nouveau nom (chaîne JSON)")


def _require_name(name: str) -> None:
    if not name or not name.strip():
        raise InvalidArgumentError("Name cannot be empty.")


@router.get("", response_model=PeopleResponse)
def get_people(queries: PeopleQueries = queries_dep):
    """Retourne toutes les personnes avec leur projection de carrière."""
    people = queries.get_all_people()
    log.info("people_listed", count=len(people))
    return PeopleResponse(people=people)


@router.get("/{name}", response_model=PersonResponse)
def get_person_by_name(name: str, queries: PeopleQueries = queries_dep):
    """
    Retourne une personne et sa projection.

    Paramètres:
    - name: nom exact de la personne.

    Retour: `PersonResponse`; 404 si la personne est inconnue.
    """
    _require_name(name)
    return PersonResponse(person=queries.get_person_by_name(name))


@router.post("", response_model=IdResponse)
def create_person(name: str = name_body, registry: PersonRegistry = registry_dep):
    """Enregistre une personne; 400 si le nom est vide, 409 s'il est déjà pris."""
    person_id = registry.register(name)
    return IdResponse(id=person_id)


@router.put("/{name}", response_model=IdResponse)
def rename_person(
    name: str, new_name: str = new_name_body, registry: PersonRegistry = registry_dep
):
    """Renomme une personne existante."""
    _require_name(name)
    person_id = registry.rename(name, new_name)
    return IdResponse(id=person_id)
