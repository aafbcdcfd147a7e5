"""Tests for the REST API, with the store and matcher injected."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_matcher, get_store
from app.core.map_matching import MatchedRoute, NoMatchError
from app.core.store import InMemoryDocumentStore, StoreError, StoreErrorKind
from app.main import app


class FakeMatcher:
    def __init__(self, result=None, error=None) -> None:
        self.result = result
        self.error = error

    async def match(self, coordinates, profile):
        if self.error:
            raise self.error
        return self.result


class BrokenStore(InMemoryDocumentStore):
    async def list(self, collection, order_by="created_at", descending=True):
        raise StoreError("connection lost", StoreErrorKind.NETWORK)


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_matcher] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/api/health").json() == {"status": "ok"}


def test_driver_crud(client):
    resp = client.post("/api/drivers", json={
        "nombre": "Juan", "apellido_paterno": "Pérez",
        "apellido_materno": "López", "no_licencia": "abc123",
    })
    assert resp.status_code == 201
    driver_id = resp.json()["id"]

    drivers = client.get("/api/drivers").json()
    assert drivers[0]["full_name"] == "Juan Pérez López"
    assert drivers[0]["no_licencia"] == "ABC123"
    assert client.get("/api/drivers", params={"q": "zzz"}).json() == []

    resp = client.patch(f"/api/drivers/{driver_id}", json={"nombre": "Juana"})
    assert resp.status_code == 200
    assert resp.json()["data"] == {"nombre": "Juana"}

    resp = client.post(f"/api/drivers/{driver_id}/active", json={"activo": 0})
    assert resp.json()["message"] == "Chofer marcado como inactivo"

    assert client.delete(f"/api/drivers/{driver_id}").status_code == 200
    assert client.delete(f"/api/drivers/{driver_id}").status_code == 404


def test_driver_validation_error(client):
    resp = client.post("/api/drivers", json={
        "nombre": "", "apellido_paterno": "Pérez",
        "apellido_materno": "López", "no_licencia": "abc123",
    })
    assert resp.status_code == 422
    assert resp.json()["detail"] == "El nombre es requerido"
    assert resp.headers["x-error-kind"] == "validation"


def test_unit_crud(client):
    resp = client.post("/api/units", json={"no_placas": "vhd1234", "no_unidad": "07", "capacidad": 40})
    assert resp.status_code == 201
    unit_id = resp.json()["id"]

    units = client.get("/api/units").json()
    assert units[0]["no_placas"] == "VHD1234"
    assert units[0]["capacidad_label"] == "40 pasajeros"

    resp = client.patch(f"/api/units/{unit_id}", json={"capacidad": -1})
    assert resp.status_code == 422


def test_route_create_and_detail(client):
    resp = client.post("/api/routes", json={
        "nombre": "Ruta Centro",
        "descripcion": "Centro a Norte",
        "coordinates": [[-108.98, 25.79], [-108.97, 25.80]],
    })
    assert resp.status_code == 201
    route_id = resp.json()["id"]

    listed = client.get("/api/routes").json()
    assert listed[0]["waypoints_count"] == 2
    assert listed[0]["distancia"] > 0

    detail = client.get(f"/api/routes/{route_id}").json()
    assert detail["waypoints"] == "-108.98,25.79;-108.97,25.8"
    assert detail["coordinates"] == [[-108.98, 25.79], [-108.97, 25.8]]
    assert detail["bounds"] == [-108.98, 25.79, -108.97, 25.8]


def test_route_rejects_out_of_range(client):
    resp = client.post("/api/routes", json={
        "nombre": "R", "descripcion": "D",
        "coordinates": [[-108.98, 25.79], [200, 10]],
    })
    assert resp.status_code == 422
    assert resp.headers["x-error-kind"] == "range"


def test_route_not_found(client):
    assert client.get("/api/routes/unknown").status_code == 404


def test_route_with_corrupt_waypoints(client, store):
    route_id = asyncio.run(store.add("rutas", {
        "nombre": "R", "descripcion": "D", "activo": 1, "waypoints": "garbage",
    }))
    assert client.get(f"/api/routes/{route_id}").status_code == 500


def test_map_defaults(client):
    defaults = client.get("/api/routes/defaults").json()
    assert defaults["center"] == [-108.9821, 25.7931]
    assert "driving-traffic" in defaults["profiles"]


def test_match_without_matcher(client):
    resp = client.post("/api/routes/match", json={"coordinates": [[-108.98, 25.79], [-108.97, 25.8]]})
    assert resp.status_code == 422


def test_match_route(client):
    matched = MatchedRoute(
        coordinates=[(-108.98, 25.79), (-108.975, 25.795), (-108.97, 25.8)],
        distance=1500.0, duration=180.0, confidence=0.92,
    )
    app.dependency_overrides[get_matcher] = lambda: FakeMatcher(result=matched)

    resp = client.post("/api/routes/match", json={
        "coordinates": [[-108.98, 25.79], [-108.97, 25.8]],
        "profile": "driving",
    })
    assert resp.status_code == 200
    body = resp.json()
    # The midpoint is collinear and gets thinned out
    assert body["coordinates"] == [[-108.98, 25.79], [-108.97, 25.8]]
    assert body["waypoints"] == "-108.98,25.79;-108.97,25.8"
    assert body["matched_points"] == 3
    assert body["confidence"] == 0.92


def test_match_no_match(client):
    app.dependency_overrides[get_matcher] = lambda: FakeMatcher(error=NoMatchError("no"))
    resp = client.post("/api/routes/match", json={"coordinates": [[-108.98, 25.79], [-108.97, 25.8]]})
    assert resp.status_code == 422


def test_match_invalid_profile(client):
    resp = client.post("/api/routes/match", json={
        "coordinates": [[-108.98, 25.79], [-108.97, 25.8]],
        "profile": "flying",
    })
    assert resp.status_code == 422


def test_store_failure_is_mapped():
    app.dependency_overrides[get_store] = lambda: BrokenStore()
    try:
        resp = TestClient(app).get("/api/drivers")
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 502
