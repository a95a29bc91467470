"""
Routes liées aux affectations: historique par personne et création d'affectation.

La création délègue au `DutyWorkflow`: retraite si le titre vaut "RETIRED", affectation
régulière sinon, le tout validé en une seule transaction.
"""

from fastapi import APIRouter, Depends

from stargate.api.deps import get_queries, get_workflow
from stargate.api.errors import APIError
from stargate.api.schemas import CreateDutyRequest, CreateDutyResponse, DutiesResponse
from stargate.core.http_constants import HTTP_BAD_REQUEST
from stargate.domain.duty_workflow import DutyWorkflow
from stargate.domain.entities import CreateDutyCommand
from stargate.domain.errors import InvalidArgumentError, NotFoundError
from stargate.domain.queries import PeopleQueries

router = APIRouter(prefix="/AstronautDuty", tags=["astronaut-duty"])

queries_dep = Depends(get_queries)
workflow_dep = Depends(get_workflow)


@router.get("/{name}", response_model=DutiesResponse)
def get_astronaut_duties_by_name(name: str, queries: PeopleQueries = queries_dep):
    """
    Retourne une personne et ses affectations par date de début croissante.

    Retour: `DutiesResponse`; 404 si la personne est inconnue ou n'a aucune affectation.
    """
    if not name.strip():
        raise InvalidArgumentError("Name cannot be empty.")
    result = queries.get_duties_by_person_name(name)
    return DutiesResponse(person=result.person, astronaut_duties=result.duties)


@router.post("", response_model=CreateDutyResponse)
def create_astronaut_duty(payload: CreateDutyRequest, workflow: DutyWorkflow = workflow_dep):
    """
    Crée une affectation (ou la retraite) pour une personne existante.

    Paramètres:
    - payload: `CreateDutyRequest` (name, rank, duty_title, duty_start_date).

    Retour: `CreateDutyResponse` avec l'id de la nouvelle affectation.
    Erreurs: 400 (champ vide, personne inconnue, ordre de dates), 409 (doublon).
    """
    try:
        result = workflow.create_duty(CreateDutyCommand(**payload.model_dump()))
    except NotFoundError as err:
        # Personne inconnue: erreur de requête sur cette route, pas une ressource absente
        raise APIError.from_domain(err, HTTP_BAD_REQUEST) from err
    return CreateDutyResponse(id=result.id, outcome=result.outcome)
