"""
Tests du moteur de règles des affectations.

Le moteur est exercé sur un vrai `DutyTimelineStore` (SQLite mémoire): fermeture de l'affectation
ouverte, validation d'ordre, projection de carrière et retraite.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from stargate.domain.duty_rules import DutyRulesEngine
from stargate.domain.errors import InvalidArgumentError, InvalidOrderingError, NotFoundError
from stargate.infra.repo.duty_store import DutyTimelineStore
from stargate.infra.repo.models import PersonORM


@pytest.fixture()
def store(session) -> DutyTimelineStore:
    return DutyTimelineStore(session)


@pytest.fixture()
def person(store: DutyTimelineStore) -> PersonORM:
    return store.add_person("John Doe")


def test_latest_open_duty_returns_most_recent_open(store, person) -> None:
    """Retourne l'affectation ouverte, pas l'affectation close plus ancienne."""
    store.add_duty(person.id, "1LT", "Commander", date(2023, 1, 1), date(2023, 1, 31))
    open_duty = store.add_duty(person.id, "1LT", "Pilot", date(2023, 2, 1))
    store.flush()

    engine = DutyRulesEngine(store)
    assert engine.latest_open_duty(person.id).id == open_duty.id


def test_latest_open_duty_none_without_duties(store, person) -> None:
    assert DutyRulesEngine(store).latest_open_duty(person.id) is None


def test_close_open_duty_sets_end_to_day_before(store, person) -> None:
    """La fin de l'affectation courante est la veille du nouveau démarrage."""
    store.add_duty(person.id, "1LT", "Commander", date(2023, 1, 1))
    store.flush()

    closed = DutyRulesEngine(store).close_open_duty(person.id, date(2023, 3, 1))

    assert closed is not None
    assert closed.duty_end_date == date(2023, 2, 28)
    assert store.latest_open_duty(person.id) is None


def test_close_open_duty_noop_for_first_duty(store, person) -> None:
    assert DutyRulesEngine(store).close_open_duty(person.id, date(2023, 3, 1)) is None


@pytest.mark.parametrize("new_start", [date(2023, 1, 1), date(2022, 12, 31)])
def test_close_open_duty_rejects_non_increasing_start(store, person, new_start) -> None:
    """Une date de début égale ou antérieure à l'affectation ouverte est refusée."""
    current = store.add_duty(person.id, "1LT", "Commander", date(2023, 1, 1))
    store.flush()

    with pytest.raises(InvalidOrderingError):
        DutyRulesEngine(store).close_open_duty(person.id, new_start)
    assert current.duty_end_date is None


def test_close_open_duty_truncates_datetime(store, person) -> None:
    store.add_duty(person.id, "1LT", "Commander", date(2023, 1, 1))
    store.flush()

    closed = DutyRulesEngine(store).close_open_duty(person.id, datetime(2023, 3, 1, 17, 45))
    assert closed.duty_end_date == date(2023, 2, 28)


def test_upsert_detail_creates_projection_for_first_duty(store, person) -> None:
    detail = DutyRulesEngine(store).upsert_detail(person, "Commander", "Captain", date(2023, 1, 1))
    store.flush()

    assert detail.current_duty_title == "Commander"
    assert detail.current_rank == "Captain"
    assert detail.career_start_date == date(2023, 1, 1)
    assert detail.career_end_date is None
    assert store.get_detail(person.id) is detail


def test_upsert_detail_keeps_earliest_career_start(store, person) -> None:
    """Le début de carrière reste la plus ancienne date de l'historique."""
    store.add_duty(person.id, "Lieutenant", "Previous", date(2022, 1, 1), date(2022, 12, 31))
    store.add_detail(person.id, "Previous", "Lieutenant", date(2022, 1, 1), date(2022, 12, 31))
    store.flush()

    detail = DutyRulesEngine(store).upsert_detail(person, "Commander", "Captain", date(2023, 1, 1))

    assert detail.current_duty_title == "Commander"
    assert detail.current_rank == "Captain"
    assert detail.career_start_date == date(2022, 1, 1)
    assert detail.career_end_date is None


def test_upsert_detail_includes_new_start_when_history_is_empty(store, person) -> None:
    """Projection existante sans affectation persistée: la nouvelle date compte."""
    store.add_detail(person.id, "Seeded", "1LT", date(2024, 1, 1))
    store.flush()

    detail = DutyRulesEngine(store).upsert_detail(person, "Pilot", "1LT", date(2023, 5, 1))
    assert detail.career_start_date == date(2023, 5, 1)


@pytest.mark.parametrize(
    ("title", "rank"),
    [("", "Captain"), ("   ", "Captain"), ("Commander", ""), ("Commander", None)],
)
def test_upsert_detail_rejects_blank_fields(store, person, title, rank) -> None:
    with pytest.raises(InvalidArgumentError):
        DutyRulesEngine(store).upsert_detail(person, title, rank, date(2023, 1, 1))


def test_upsert_detail_rejects_unsaved_person(store) -> None:
    """Une personne sans id positif n'est pas une référence valide."""
    ghost = PersonORM(name="Ghost")
    with pytest.raises(InvalidArgumentError):
        DutyRulesEngine(store).upsert_detail(ghost, "Pilot", "1LT", date(2023, 1, 1))


def test_retire_updates_detail_and_opens_retired_duty(store, person) -> None:
    store.add_duty(person.id, "Captain", "Commander", date(2022, 1, 1))
    store.add_detail(person.id, "Commander", "Captain", date(2022, 1, 1))
    store.flush()

    retired = DutyRulesEngine(store).retire(person, date(2023, 1, 1), "Major")
    store.flush()

    detail = store.get_detail(person.id)
    assert retired.duty_title == "RETIRED"
    assert retired.rank == "Major"
    assert retired.duty_start_date == date(2023, 1, 1)
    assert retired.duty_end_date is None
    assert detail.current_duty_title == "RETIRED"
    assert detail.current_rank == "Major"
    assert detail.career_end_date == date(2022, 12, 31)
    assert detail.career_start_date == date(2022, 1, 1)
    # L'affectation précédente est close la veille, la retraite est la seule ouverte
    duties = store.duties_for_person(person.id)
    assert duties[0].duty_end_date == date(2022, 12, 31)
    assert [d.duty_title for d in duties if d.duty_end_date is None] == ["RETIRED"]


def test_retire_without_detail_is_not_found(store, person) -> None:
    with pytest.raises(NotFoundError):
        DutyRulesEngine(store).retire(person, date(2023, 1, 1), "Captain")
    assert store.duties_for_person(person.id) == []


def test_retire_applies_ordering_rule(store, person) -> None:
    """La retraite ne peut pas précéder l'affectation ouverte; la projection reste intacte."""
    store.add_duty(person.id, "Captain", "Commander", date(2023, 6, 1))
    detail = store.add_detail(person.id, "Commander", "Captain", date(2023, 6, 1))
    store.flush()

    with pytest.raises(InvalidOrderingError):
        DutyRulesEngine(store).retire(person, date(2023, 6, 1), "Captain")
    assert detail.current_duty_title == "Commander"
    assert detail.career_end_date is None


def test_close_open_duty_accepts_datetime(store, person) -> None:
    """Une date de début avec heure est ramenée au jour avant la comparaison."""
    store.add_duty(person.id, "1LT", "Commander", date(2024, 2, 1))
    store.flush()

    closed = DutyRulesEngine(store).close_open_duty(person.id, datetime(2024, 3, 1, 23, 59))

    assert closed.duty_end_date == date(2024, 2, 29)
    assert type(closed.duty_end_date) is date
