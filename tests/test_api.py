"""Tests for the FastAPI endpoints: analysis, catalogue listing, health."""

import json
from pathlib import Path

import pytest
import yaml
from fastapi.testclient import TestClient

from firebreak.api import create_app
from firebreak.config import Settings

ROUTE = {
    "distance": 1000,
    "trackProfile": {"totalDistance": 1000, "maxSlope": 15},
    "vegetationProfile": {"predominantVegetation": "grassland"},
}

DOZER = {
    "type": "Machinery",
    "id": "dozer-1",
    "name": "Test Dozer",
    "clearingRate": 100,
    "costPerHour": 50,
    "allowedTerrain": ["easy", "moderate"],
    "allowedVegetation": ["grassland"],
}


@pytest.fixture
def catalogue_path(tmp_path: Path) -> Path:
    path = tmp_path / "fleet.yaml"
    retired = {**DOZER, "id": "old", "name": "Retired", "active": False}
    path.write_text(yaml.safe_dump({"equipment": [DOZER, retired]}), encoding="utf-8")
    return path


@pytest.fixture
def client(catalogue_path: Path, tmp_path: Path) -> TestClient:
    settings = Settings(
        _env_file=None,
        equipment_catalogue=catalogue_path,
        telemetry_log=tmp_path / "telemetry.jsonl",
        log_level="WARNING",
    )
    return TestClient(create_app(settings))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_calculate_uses_configured_catalogue(client, tmp_path: Path):
    response = client.post("/api/analysis/calculate", json=ROUTE)
    assert response.status_code == 200
    body = response.json()
    assert [calc["id"] for calc in body["calculations"]] == ["dozer-1"]
    calc = body["calculations"][0]
    assert calc["compatibilityLevel"] == "full"
    assert calc["time"] == pytest.approx(13.0)
    assert calc["cost"] == pytest.approx(650.0)
    assert body["metadata"]["equipmentCount"] == 1
    assert body["metadata"]["analysisParameters"]["effectiveTerrain"] == "moderate"

    (record,) = (tmp_path / "telemetry.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(record)["source"] == "api"


def test_calculate_with_inline_equipment(client):
    invalid = {**DOZER, "id": "bad", "name": "Broken", "clearingRate": 0}
    response = client.post("/api/analysis/calculate", json={**ROUTE, "equipment": [invalid, DOZER]})
    assert response.status_code == 200
    body = response.json()
    assert [calc["id"] for calc in body["calculations"]] == ["dozer-1", "bad"]
    assert body["calculations"][1]["validationErrors"] == [
        "Machinery must have positive clearing rate"
    ]
    assert body["metadata"]["validationErrors"] == [
        "Broken: Machinery must have positive clearing rate"
    ]


def test_calculate_accepts_track_analysis_alias(client):
    payload = {
        "distance": 500,
        "trackAnalysis": ROUTE["trackProfile"],
        "vegetationAnalysis": ROUTE["vegetationProfile"],
    }
    assert client.post("/api/analysis/calculate", json=payload).status_code == 200


def test_invalid_json_body(client):
    response = client.post(
        "/api/analysis/calculate",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body - must be valid JSON"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ([], "Request body must be a JSON object"),
        ({**ROUTE, "distance": 0}, "Distance must be a positive number"),
        ({**ROUTE, "distance": "far"}, "Distance must be a positive number"),
        ({"distance": 10, "vegetationProfile": ROUTE["vegetationProfile"]}, "Track profile is required"),
        ({"distance": 10, "trackProfile": ROUTE["trackProfile"]}, "Vegetation profile is required"),
    ],
)
def test_request_shape_errors(client, payload, message):
    response = client.post("/api/analysis/calculate", json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": message}


def test_unknown_vegetation_is_rejected(client):
    payload = {**ROUTE, "vegetationProfile": {"predominantVegetation": "swamp"}}
    response = client.post("/api/analysis/calculate", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid analysis request"
    assert body["details"]


def test_equipment_must_be_list(client):
    response = client.post("/api/analysis/calculate", json={**ROUTE, "equipment": {"id": "x"}})
    assert response.status_code == 400
    assert response.json()["error"] == "Equipment must be a list"


def test_missing_catalogue_is_server_error(tmp_path: Path):
    settings = Settings(_env_file=None, equipment_catalogue=tmp_path / "missing.yaml")
    response = TestClient(create_app(settings)).post("/api/analysis/calculate", json=ROUTE)
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to calculate equipment analysis"


def test_list_equipment(client):
    active = client.get("/api/equipment").json()
    assert [item["id"] for item in active["equipment"]] == ["dozer-1"]
    assert active["equipment"][0]["clearingRate"] == 100
    everything = client.get("/api/equipment", params={"include_inactive": True}).json()
    assert [item["id"] for item in everything["equipment"]] == ["dozer-1", "old"]


def test_unparseable_inline_entries_reported(client):
    nameless = {**DOZER, "id": "n", "name": None}
    wordy = {**DOZER, "id": "w", "name": "Wordy", "clearingRate": "fast"}
    response = client.post(
        "/api/analysis/calculate", json={**ROUTE, "equipment": [nameless, wordy, DOZER]}
    )
    assert response.status_code == 200
    body = response.json()
    assert [calc["id"] for calc in body["calculations"]] == ["dozer-1"]
    skipped = body["metadata"]["skipped"]
    assert len(skipped) == 2
    assert skipped[0].startswith("entry 0 (unnamed)")
    assert skipped[1].startswith("entry 1 (Wordy)")
    assert "clearingRate" in skipped[1]


def test_catalogue_response_has_empty_skipped_list(client):
    body = client.post("/api/analysis/calculate", json=ROUTE).json()
    assert body["metadata"]["skipped"] == []


@pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
def test_non_finite_distance_is_client_error(client, literal):
    content = (
        '{"distance": %s, "trackProfile": {"totalDistance": 1000, "maxSlope": 15},'
        ' "vegetationProfile": {"predominantVegetation": "grassland"}}' % literal
    )
    response = client.post(
        "/api/analysis/calculate",
        content=content.encode(),
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Distance must be a positive number"}


def test_non_finite_track_values_are_client_errors(client):
    content = (
        '{"distance": 1000, "trackProfile": {"totalDistance": Infinity, "maxSlope": NaN},'
        ' "vegetationProfile": {"predominantVegetation": "grassland"}}'
    )
    response = client.post(
        "/api/analysis/calculate",
        content=content.encode(),
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid analysis request"
    locations = {tuple(detail["loc"]) for detail in body["details"]}
    assert ("trackProfile", "totalDistance") in locations
    assert ("trackProfile", "maxSlope") in locations


def test_list_equipment_missing_catalogue(tmp_path: Path):
    settings = Settings(_env_file=None, equipment_catalogue=tmp_path / "missing.yaml")
    response = TestClient(create_app(settings)).get("/api/equipment")
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to load equipment catalogue"


def test_list_equipment_unsupported_catalogue(tmp_path: Path):
    path = tmp_path / "fleet.txt"
    path.write_text("equipment: []", encoding="utf-8")
    response = TestClient(create_app(Settings(_env_file=None, equipment_catalogue=path))).get(
        "/api/equipment"
    )
    assert response.status_code == 500
    assert "Unsupported file type" in response.json()["details"]
