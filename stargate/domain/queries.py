"""Surface de lecture: personnes, projections et historiques d'affectations."""

from __future__ import annotations

from collections.abc import Callable

from stargate.domain.entities import DutyView, PersonDuties, PersonView
from stargate.domain.errors import NotFoundError


def to_person_view(person, detail) -> PersonView:  # type: ignore[no-untyped-def]
    """Assemble la vue personne + projection (projection éventuellement absente)."""
    view = PersonView(person_id=person.id, name=person.name)
    if detail is not None:
        view.current_rank = detail.current_rank
        view.current_duty_title = detail.current_duty_title
        view.career_start_date = detail.career_start_date
        view.career_end_date = detail.career_end_date
    return view


class PeopleQueries:
    """Requêtes en lecture seule (une session courte par appel)."""

    def __init__(self, uow_factory: Callable) -> None:
        self.uow_factory = uow_factory

    def get_all_people(self) -> list[PersonView]:
        with self.uow_factory() as uow:
            return [to_person_view(p, d) for p, d in uow.store.list_people()]

    def get_person_by_name(self, name: str) -> PersonView:
        """Raises: NotFoundError si aucune personne ne porte ce nom."""
        with self.uow_factory() as uow:
            person = uow.store.get_person_by_name(name)
            if person is None:
                raise NotFoundError(f"Person with name {name} not found")
            return to_person_view(person, uow.store.get_detail(person.id))

    def get_duties_by_person_name(self, name: str) -> PersonDuties:
        """Historique chronologique (date de début croissante).

        Raises:
            NotFoundError: personne inconnue ou sans aucune affectation.
        """
        with self.uow_factory() as uow:
            person = uow.store.get_person_by_name(name)
            if person is None:
                raise NotFoundError(f"Person with name {name} not found")
            duties = uow.store.duties_for_person(person.id)
            if not duties:
                raise NotFoundError(f"No astronaut duties found for {name}")
            return PersonDuties(
                person=to_person_view(person, uow.store.get_detail(person.id)),
                duties=[DutyView.model_validate(d) for d in duties],
            )
