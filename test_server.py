"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from carverity import analyser
from carverity.utils.config import default_config
from server import app


@pytest.fixture
def client(monkeypatch):
    config = default_config()
    config.server.max_payload_kb = 4
    monkeypatch.setattr(analyser, "_config", config)
    return TestClient(app)


def test_healthz(client):
    response = client.get("/healthz")
    
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyse_full_record(client, full_progress):
    response = client.post("/api/inspections/analyse", json=full_progress)
    
    assert response.status_code == 200
    data = response.json()
    assert data["verdict"] == "proceed"
    assert data["completenessScore"] == 95
    assert data["confidenceScore"] == 97


def test_analyse_empty_object(client):
    response = client.post("/api/inspections/analyse", json={})
    
    assert response.status_code == 200
    assert response.json()["verdict"] == "walk-away"


def test_analyse_rejects_non_object(client):
    response = client.post("/api/inspections/analyse", json=[1, 2, 3])
    
    assert response.status_code == 400
    assert response.json()["error"] == "PAYLOAD_NOT_OBJECT"


def test_analyse_rejects_invalid_json(client):
    response = client.post(
        "/api/inspections/analyse",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    
    assert response.status_code == 400


def test_analyse_rejects_oversized_body(client):
    payload = {"photos": [{"id": "p1", "stepId": "exterior-front", "dataUrl": "x" * 8192}]}
    response = client.post("/api/inspections/analyse", json=payload)
    
    assert response.status_code == 413
    assert response.json()["error"] == "PAYLOAD_TOO_LARGE"


def test_explain(client, full_progress):
    response = client.post("/api/inspections/explain", json=full_progress)
    
    assert response.status_code == 200
    data = response.json()
    assert data["analysis"]["verdict"] == "proceed"
    assert data["explanation"]["verdictKey"] == "proceed"


def test_report_returns_pdf(client, full_progress):
    response = client.post("/api/inspections/report", json=full_progress)
    
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert 'filename="scan-full_report.pdf"' in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_service_history_guidance(client):
    response = client.post(
        "/api/service-history/guidance",
        json={"text": "Recently serviced, but the logbook stamp is questionable"},
    )
    
    assert response.status_code == 200
    guidance = response.json()["guidance"]
    assert guidance["costImpact"]["level"] == "moderate"


def test_service_history_guidance_requires_string(client):
    response = client.post("/api/service-history/guidance", json={"text": 42})
    
    assert response.status_code == 400
