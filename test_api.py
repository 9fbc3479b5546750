"""
Tests for the extraction HTTP API
"""

from fastapi.testclient import TestClient

from phonetable import main
from phonetable.main import app

client = TestClient(app)


def test_ping():
    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health():
    response = client.get("/health")
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"]["status"] == "healthy"


def test_extract_directory(directory_text):
    response = client.post("/api/v1/extract", json={"text": directory_text, "source_file": "directory.pdf"})
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert len(body["data"]["records"]) == 9
    assert body["data"]["records"][0]["phone_number"] == "91234567"
    assert body["data"]["records"][0]["metadata"]["company_name"]["value"] == "Acme Pte Ltd"
    assert body["data"]["report"]["extraction_summary"]["source_file"] == "directory.pdf"
    assert body["meta"]["warnings"] == []


def test_extract_empty_text():
    response = client.post("/api/v1/extract", json={"text": "   "})
    body = response.json()

    assert response.status_code == 422
    assert body["success"] is False
    assert body["error"] == "empty-content"
    assert body["path"] == "/api/v1/extract"


def test_extract_without_phone_numbers(no_phone_text):
    response = client.post("/api/v1/extract", json={"text": no_phone_text})
    body = response.json()

    assert response.status_code == 422
    assert body["error"] == "no-records-found"
    assert "No phone records found" in body["detail"]["issues"]
    assert body["detail"]["suggestions"]


def test_extract_text_too_large(monkeypatch):
    monkeypatch.setattr(main.settings, "max_text_length", 10)

    response = client.post("/api/v1/extract", json={"text": "91234567    Acme Pte Ltd"})

    assert response.status_code == 413


def test_extract_requires_text():
    response = client.post("/api/v1/extract", json={"source_file": "directory.pdf"})

    assert response.status_code == 422


def test_health_is_rate_limited():
    main.limiter.reset()

    statuses = [client.get("/health").status_code for _ in range(101)]
    main.limiter.reset()

    assert statuses[:100] == [200] * 100
    assert statuses[100] == 429
