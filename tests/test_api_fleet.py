"""
Tests for the fleet HTTP endpoints.

Runs the FastAPI app with an in-memory repository.
Validates content negotiation, status codes, documents and error mapping.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from shuttletrack.core.config import Settings
from shuttletrack.domain.fleet.ports import BusSource
from shuttletrack.domain.fleet.repository import BusRepository
from shuttletrack.infrastructure.fleet import MemoryBusSource
from shuttletrack.interfaces.jsonapi import CONTENT_TYPE
from shuttletrack.main import create_app

HEADERS = {"Accept": CONTENT_TYPE, "Content-Type": CONTENT_TYPE}


class _Clock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(milliseconds=10)
        return self.now


def _client(source: BusSource | None = None) -> TestClient:
    repository = BusRepository(source or MemoryBusSource(), clock=_Clock())
    app = create_app(settings=Settings(), repository=repository)
    return TestClient(app, raise_server_exceptions=False)


def _bus_document(bus_id: str = "bus-1", **attributes) -> dict:
    document: dict = {"jsonapi": {"version": "1.0"}, "data": {"type": "bus", "id": bus_id}}
    if attributes:
        document["data"]["attributes"] = attributes
    return document


def _first_error(response) -> dict:
    assert response.headers["content-type"].startswith(CONTENT_TYPE)
    return response.json()["errors"][0]


class TestCreateEndpoint:
    """Tests for POST /bus."""

    def test_create_returns_201_with_location(self) -> None:
        client = _client()
        response = client.post(
            "/bus", json=_bus_document(latitude=1.23, longitude=4.56), headers=HEADERS
        )

        assert response.status_code == 201
        assert response.headers["location"] == "http://testserver/bus/bus-1"
        data = response.json()["data"]
        assert data["type"] == "bus"
        assert data["links"]["self"] == "http://testserver/bus/bus-1"
        assert data["attributes"]["created_at"] == data["attributes"]["updated_at"]

    def test_duplicate_returns_409(self) -> None:
        client = _client()
        client.post("/bus", json=_bus_document(latitude=1.0), headers=HEADERS)
        response = client.post("/bus", json=_bus_document(latitude=2.0), headers=HEADERS)

        assert response.status_code == 409
        error = _first_error(response)
        assert error["title"] == "Existing bus ID"
        assert error["source"]["pointer"] == "/data/id"

    def test_missing_id_returns_422(self) -> None:
        response = _client().post("/bus", json=_bus_document(bus_id=""), headers=HEADERS)
        assert response.status_code == 422
        assert _first_error(response)["source"]["pointer"] == "/data/id"

    def test_client_timestamp_returns_422(self) -> None:
        document = _bus_document(created_at="2026-01-01T00:00:00Z")
        response = _client().post("/bus", json=document, headers=HEADERS)
        assert response.status_code == 422
        assert _first_error(response)["source"]["pointer"] == "/data/attributes/created_at"

    def test_unsupported_version_returns_400(self) -> None:
        document = _bus_document()
        document["jsonapi"]["version"] = "100.0"
        response = _client().post("/bus", json=document, headers=HEADERS)
        assert response.status_code == 400
        assert _first_error(response)["source"]["pointer"] == "/jsonapi/version"

    def test_wrong_type_returns_409(self) -> None:
        document = _bus_document()
        document["data"]["type"] = "car"
        response = _client().post("/bus", json=document, headers=HEADERS)
        assert response.status_code == 409
        assert _first_error(response)["source"]["pointer"] == "/data/type"

    def test_malformed_attribute_returns_400_with_pointer(self) -> None:
        response = _client().post(
            "/bus", json=_bus_document(latitude="north"), headers=HEADERS
        )
        assert response.status_code == 400
        assert _first_error(response)["source"]["pointer"] == "/data/attributes/latitude"

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_coordinate_returns_400_and_stores_nothing(
        self, literal: str
    ) -> None:
        client = _client()
        body = (
            '{"data": {"type": "bus", "id": "bus-1", '
            f'"attributes": {{"latitude": {literal}}}}}}}'
        )

        response = client.post("/bus", content=body.encode(), headers=HEADERS)

        assert response.status_code == 400
        assert _first_error(response)["source"]["pointer"] == "/data/attributes/latitude"
        assert client.get("/bus/bus-1").status_code == 404
        assert client.get("/bus").json()["data"] == []

    def test_non_finite_coordinate_rejected_on_update(self) -> None:
        client = _client()
        client.post("/bus", json=_bus_document(latitude=1.0), headers=HEADERS)
        body = '{"data": {"type": "bus", "id": "bus-1", "attributes": {"longitude": NaN}}}'

        response = client.patch("/bus/bus-1", content=body.encode(), headers=HEADERS)

        assert response.status_code == 400
        assert _first_error(response)["source"]["pointer"] == "/data/attributes/longitude"
        assert client.get("/bus/bus-1").json()["data"]["attributes"]["latitude"] == 1.0

    def test_invalid_json_returns_400(self) -> None:
        response = _client().post("/bus", content=b"{not json", headers=HEADERS)
        assert response.status_code == 400
        assert _first_error(response)["title"] == "Invalid JSON format"

    def test_wrong_content_type_returns_415(self) -> None:
        response = _client().post(
            "/bus",
            json=_bus_document(),
            headers={"Accept": CONTENT_TYPE, "Content-Type": "application/json"},
        )
        assert response.status_code == 415

    def test_unacceptable_accept_returns_406(self) -> None:
        response = _client().post(
            "/bus",
            json=_bus_document(),
            headers={"Accept": "text/html", "Content-Type": CONTENT_TYPE},
        )
        assert response.status_code == 406


class TestReadEndpoints:
    """Tests for GET /bus and GET /bus/{id}."""

    def test_list_buses_ordered_with_links(self) -> None:
        client = _client()
        for bus_id in ("b", "a"):
            client.post("/bus", json=_bus_document(bus_id=bus_id), headers=HEADERS)

        response = client.get("/bus", headers={"Accept": CONTENT_TYPE})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(CONTENT_TYPE)
        data = response.json()["data"]
        assert [item["id"] for item in data] == ["a", "b"]
        assert data[0]["links"]["self"] == "http://testserver/bus/a"

    def test_list_empty(self) -> None:
        response = _client().get("/bus")
        assert response.status_code == 200
        assert response.json()["data"] == []

    def test_read_bus(self) -> None:
        client = _client()
        client.post("/bus", json=_bus_document(latitude=1.5, longitude=2.5), headers=HEADERS)

        response = client.get("/bus/bus-1", headers={"Accept": CONTENT_TYPE})

        assert response.status_code == 200
        attributes = response.json()["data"]["attributes"]
        assert attributes["latitude"] == 1.5
        assert attributes["longitude"] == 2.5

    def test_head_bus(self) -> None:
        client = _client()
        client.post("/bus", json=_bus_document(), headers=HEADERS)
        assert client.head("/bus/bus-1").status_code == 200

    def test_read_unknown_returns_404(self) -> None:
        response = _client().get("/bus/ghost")
        assert response.status_code == 404
        assert _first_error(response)["title"] == "Bus ID not found"

    def test_unacceptable_accept_returns_406(self) -> None:
        response = _client().get("/bus", headers={"Accept": "text/html"})
        assert response.status_code == 406


class TestUpdateEndpoint:
    """Tests for PATCH /bus/{id}."""

    def test_update_uses_path_id(self) -> None:
        client = _client()
        created = client.post(
            "/bus", json=_bus_document(latitude=1.0, longitude=2.0), headers=HEADERS
        ).json()["data"]

        response = client.patch(
            "/bus/bus-1", json=_bus_document(bus_id="", latitude=0.0), headers=HEADERS
        )

        assert response.status_code == 200
        attributes = response.json()["data"]["attributes"]
        assert attributes["latitude"] == 0.0
        assert attributes["longitude"] == 2.0
        assert attributes["updated_at"] > created["attributes"]["updated_at"]

    def test_mismatched_body_id_returns_422(self) -> None:
        client = _client()
        client.post("/bus", json=_bus_document(), headers=HEADERS)
        response = client.patch("/bus/bus-1", json=_bus_document(bus_id="bus-2"), headers=HEADERS)
        assert response.status_code == 422
        assert _first_error(response)["source"]["pointer"] == "/data/id"

    def test_stale_token_returns_422(self) -> None:
        client = _client()
        created = client.post("/bus", json=_bus_document(), headers=HEADERS).json()
        token = created["data"]["attributes"]["updated_at"]
        client.patch("/bus/bus-1", json=_bus_document(latitude=1.0), headers=HEADERS)

        response = client.patch(
            "/bus/bus-1", json=_bus_document(latitude=2.0, updated_at=token), headers=HEADERS
        )

        assert response.status_code == 422
        assert _first_error(response)["source"]["pointer"] == "/data/attributes/updated_at"
        stored = client.get("/bus/bus-1").json()["data"]["attributes"]
        assert stored["latitude"] == 1.0

    def test_update_unknown_returns_404(self) -> None:
        response = _client().patch("/bus/ghost", json=_bus_document(bus_id="ghost"), headers=HEADERS)
        assert response.status_code == 404

    def test_method_override_header(self) -> None:
        client = _client()
        client.post("/bus", json=_bus_document(latitude=1.0), headers=HEADERS)

        response = client.post(
            "/bus/bus-1",
            json=_bus_document(latitude=3.0),
            headers={**HEADERS, "X-HTTP-Method-Override": "PATCH"},
        )

        assert response.status_code == 200
        assert response.json()["data"]["attributes"]["latitude"] == 3.0


class TestDeleteEndpoint:
    """Tests for DELETE /bus/{id}."""

    def test_delete_returns_204_then_404(self) -> None:
        client = _client()
        client.post("/bus", json=_bus_document(), headers=HEADERS)

        assert client.delete("/bus/bus-1").status_code == 204
        assert client.delete("/bus/bus-1").status_code == 404
        assert client.get("/bus/bus-1").status_code == 404


class TestErrorDocuments:
    """Tests for routing failures and unexpected errors."""

    def test_unknown_url_returns_404_document(self) -> None:
        response = _client().get("/nowhere")
        assert response.status_code == 404
        assert _first_error(response)["title"] == "URL not found"

    def test_wrong_method_returns_405_document(self) -> None:
        response = _client().put("/bus", json=_bus_document(), headers=HEADERS)
        assert response.status_code == 405
        assert _first_error(response)["title"] == "HTTP method not allowed"

    def test_backend_failure_returns_500_without_internals(self) -> None:
        source = MagicMock(spec=BusSource)
        source.read_all.side_effect = RuntimeError("connection refused to 10.0.0.5")

        response = _client(source).get("/bus")

        assert response.status_code == 500
        assert "10.0.0.5" not in response.text


def test_lifespan_closes_repository() -> None:
    source = MagicMock(spec=BusSource)
    app = create_app(settings=Settings(), repository=BusRepository(source))

    with TestClient(app):
        source.close.assert_not_called()

    source.close.assert_called_once_with()


def test_end_to_end_scenario() -> None:
    client = _client()

    created = client.post(
        "/bus", json=_bus_document(latitude=1.23, longitude=4.56), headers=HEADERS
    )
    assert created.status_code == 201
    attributes = created.json()["data"]["attributes"]
    assert attributes["created_at"] == attributes["updated_at"]

    duplicate = client.post(
        "/bus", json=_bus_document(latitude=1.23, longitude=4.56), headers=HEADERS
    )
    assert duplicate.status_code == 409

    updated = client.patch("/bus/bus-1", json=_bus_document(latitude=9.9), headers=HEADERS)
    assert updated.status_code == 200
    updated_attributes = updated.json()["data"]["attributes"]
    assert updated_attributes["latitude"] == 9.9
    assert updated_attributes["updated_at"] > attributes["updated_at"]

    assert client.delete("/bus/bus-1").status_code == 204
    assert client.get("/bus/bus-1").status_code == 404
