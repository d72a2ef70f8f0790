# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_spacelaw

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from coreason_spacelaw.archive import get_default_archive
from coreason_spacelaw.server import app


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert "version" in data
    assert data["data_version"]


def test_list_jurisdictions(client: TestClient) -> None:
    response = client.get("/jurisdictions")
    assert response.status_code == 200
    codes = {j["country_code"] for j in response.json()}
    assert {"FR", "DE", "UK"} <= codes


def test_get_jurisdiction(client: TestClient) -> None:
    response = client.get("/jurisdictions/lu")
    assert response.status_code == 200
    assert response.json()["country_name"] == "Luxembourg"


def test_get_unknown_jurisdiction(client: TestClient) -> None:
    response = client.get("/jurisdictions/XX")
    assert response.status_code == 404


def test_list_guidelines_filtered(client: TestClient) -> None:
    response = client.get("/guidelines", params={"source": "ISO", "category": "disposal"})
    assert response.status_code == 200
    guidelines = response.json()
    assert guidelines
    assert all(g["source"] == "ISO" and g["category"] == "disposal" for g in guidelines)


def test_assess_space_law_is_redacted(client: TestClient) -> None:
    payload = {
        "selected_jurisdictions": ["FR", "DE", "XX"],
        "activity_type": "spacecraft_operation",
        "licensing_status": "new_application",
    }
    response = client.post("/assess/space-law", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert [j["country_code"] for j in body["jurisdictions"]] == ["FR", "DE"]
    assert all("applicable_requirements" not in j for j in body["jurisdictions"])
    assert all("requirement_count" in j for j in body["jurisdictions"])
    assert len(body["recommendations"]) <= 6


def test_assess_space_law_invalid_input(client: TestClient) -> None:
    response = client.post("/assess/space-law", json={"selected_jurisdictions": "FR"})
    assert response.status_code == 422


def test_assess_guidelines(client: TestClient) -> None:
    payload = {
        "profile": {"orbit_regime": "LEO", "mission_type": "scientific", "satellite_mass_kg": 4},
        "assessments": [{"guideline_id": "copuos-lts-a5", "status": "compliant"}],
    }
    response = client.post("/assess/guidelines", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["profile"]["satellite_category"] == "cubesat"
    assert 0 <= body["score"]["overall"] <= 100
    assert body["risk_level"] in {"low", "medium", "high", "critical"}


def test_assess_guidelines_invalid_profile(client: TestClient) -> None:
    response = client.post("/assess/guidelines", json={"profile": {"orbit_regime": "LEO"}})
    assert response.status_code == 400
    assert "satellite_mass_kg" in response.json()["detail"]


def test_score_insurance(client: TestClient) -> None:
    payload = {"required_types": ["launch", "third_party"], "statuses": {"launch": "active"}}
    response = client.post("/score/insurance", json=payload)
    assert response.status_code == 200
    assert response.json() == {"score": 50}


def test_score_insurance_rejects_unknown_status(client: TestClient) -> None:
    payload = {"required_types": ["launch"], "statuses": {"launch": "pending"}}
    response = client.post("/score/insurance", json=payload)
    assert response.status_code == 422


def test_server_shares_default_archive(client: TestClient) -> None:
    assert client.app.state.engine.archive is get_default_archive()
