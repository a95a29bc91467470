"""Tests de l'assemblage de l'application: santé, métriques, en-têtes et enveloppes d'erreur."""

from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from stargate.app.main import create_app
from stargate.core.http_constants import (
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_SERVICE_UNAVAILABLE,
)


def test_health(client) -> None:
    """Teste que l'endpoint de santé retourne un statut OK avec le backend de stockage."""
    r = client.get("/health")
    assert r.status_code == HTTP_OK
    assert r.json() == {"status": "ok", "storage": "sqlite", "database": True}


def test_health_reports_unreachable_storage(client, container) -> None:
    with patch.object(
        container, "ping", side_effect=OperationalError("SELECT 1", {}, Exception("down"))
    ):
        r = client.get("/health")
    assert r.status_code == HTTP_SERVICE_UNAVAILABLE
    assert r.json()["status"] == "degraded"


def test_metrics_exposed(client) -> None:
    client.post("/Person", json="John Doe")
    client.post(
        "/AstronautDuty",
        json={
            "name": "John Doe",
            "rank": "1LT",
            "duty_title": "Commander",
            "duty_start_date": "2023-01-01",
        },
    )
    r = client.get("/metrics")
    assert r.status_code == HTTP_OK
    assert b"http_requests_total" in r.content
    assert b"duty_assignments_total" in r.content
    assert b"people_registered_total" in r.content


def test_request_id_and_timing_headers(client) -> None:
    r = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"
    assert int(r.headers["X-Process-Time-ms"]) >= 0

    generated = client.get("/health").headers["X-Request-ID"]
    assert generated and generated != "req-123"


def test_error_envelope_carries_request_id(client) -> None:
    r = client.get("/Person/Nobody", headers={"X-Request-ID": "trace-42"})
    assert r.status_code == HTTP_NOT_FOUND
    assert r.json()["trace_id"] == "trace-42"


def test_unknown_route_uses_envelope(client) -> None:
    r = client.get("/does-not-exist")
    assert r.status_code == HTTP_NOT_FOUND
    assert r.json()["code"] == "not_found"
    assert r.json()["success"] is False


def test_store_failure_is_internal_error(container) -> None:
    """Une erreur inattendue du stockage donne un 500 avec l'enveloppe standard."""
    app = create_app(container)
    c = TestClient(app, raise_server_exceptions=False)
    with patch.object(container.queries, "get_all_people", side_effect=RuntimeError("db down")):
        r = c.get("/Person")
    assert r.status_code == HTTP_INTERNAL_SERVER_ERROR
    body = r.json()
    assert body["code"] == "internal_error"
    assert body["message"] == "db down"


def test_create_app_can_skip_schema_creation(settings) -> None:
    from stargate.core.container import Container  # noqa: PLC0415

    settings.DB_AUTO_CREATE = False
    container = Container(settings)
    try:
        with patch.object(container, "init_schema") as init_schema:
            create_app(container)
        init_schema.assert_not_called()
    finally:
        container.dispose()
