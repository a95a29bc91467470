"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Centraliser l'accès aux services métier depuis les endpoints.
- Résoudre le conteneur attaché à l'application (`app.state.container`) plutôt qu'un
  singleton global, ce qui permet aux tests de brancher leur propre stockage.
"""

from fastapi import Request

from stargate.core.container import Container
from stargate.domain.duty_workflow import DutyWorkflow
from stargate.domain.people import PersonRegistry
from stargate.domain.queries import PeopleQueries


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_workflow(request: Request) -> DutyWorkflow:
    return get_container(request).workflow


def get_queries(request: Request) -> PeopleQueries:
    return get_container(request).queries


def get_registry(request: Request) -> PersonRegistry:
    return get_container(request).registry
