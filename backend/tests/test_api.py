"""
Service Boundary Tests

Exercises each endpoint through FastAPI's TestClient: camelCase payloads,
400 responses for malformed input, and result publishing.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.publishing import ResultPublisher


@pytest.fixture
def published():
    return []


@pytest.fixture
def client(published):
    app.state.publisher = ResultPublisher([published.append])
    with TestClient(app) as test_client:
        yield test_client
    app.state.publisher = None


class TestServiceInfo:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["endpoints"]["consent"] == "/consent/audit"

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestConsentEndpoint:

    def test_audit(self, client, published):
        response = client.post("/consent/audit", json={
            "contacts": [
                {"email": "jane@example.com", "consentDate": "2025-09-01",
                 "consentMethod": "Double opt-in", "source": "Website"},
                {"email": "bob@example.com", "consentDate": None,
                 "consentMethod": "Web form", "source": "Website"},
            ],
            "customerType": "none",
            "productType": "mixed",
            "emailType": "b2c",
            "evaluationDate": "2026-01-15",
            "userId": "user-1",
        })
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["counts"] == {"safe": 1, "probably": 0, "risky": 0, "danger": 1}
        assert body["safe"][0]["category"] == "Express consent"
        assert body["danger"][0]["bucket"] == "danger"
        assert body["expiryTimeline"]["labels"][0] == "Jan 2026"
        assert body["sourceQuality"][0] == {"source": "Website", "total": 2, "avgScore": 50, "rating": "Poor"}
        assert [event.kind for event in published] == ["consent_audit"]
        assert published[0].check_date.isoformat() == "2026-01-15"

    def test_unknown_customer_type_rejected(self, client):
        response = client.post("/consent/audit", json={"contacts": [], "customerType": "maybe"})
        assert response.status_code == 422


class TestHygieneEndpoint:

    def test_check(self, client):
        response = client.post("/hygiene/check", json={
            "sendList": ["A@B.com", "a@b.com ", "info@shop.com", "bad"],
            "suppressionList": [],
        })
        assert response.status_code == 200
        body = response.json()
        assert body["cleanList"] == ["a@b.com", "info@shop.com"]
        assert body["duplicateCount"] == 1
        assert body["invalidCount"] == 1
        assert body["roleEmailCount"] == 1
        assert body["removedCount"] == 2
        assert [w["severity"] for w in body["warnings"]] == ["warning", "warning", "info"]

    @pytest.mark.parametrize("payload", [
        {"sendList": "a@b.com", "suppressionList": []},
        {"sendList": ["a@b.com"]},
        {"sendList": ["a@b.com", 3], "suppressionList": []},
    ])
    def test_malformed_lists(self, client, payload):
        assert client.post("/hygiene/check", json=payload).status_code == 400

    def test_anonymous_check_not_published(self, client, published):
        client.post("/hygiene/check", json={"sendList": [], "suppressionList": []})
        assert published == []


class TestContentEndpoint:

    def test_scan(self, client, published):
        response = client.post("/content/scan", json={
            "subject": "Spring update from the team",
            "html": "<html><body><p>Hello</p><script></script></body></html>",
            "userId": "user-1",
        })
        assert response.status_code == 200
        body = response.json()
        assert 0 <= body["score"] <= 100
        assert body["summary"]["failed"] >= 2
        assert published[0].payload["subject"] == "Spring update from the team"

    @pytest.mark.parametrize("payload", [
        {"subject": "", "html": "<p>x</p>"},
        {"subject": "Hello"},
        {},
    ])
    def test_subject_and_html_required(self, client, payload):
        response = client.post("/content/scan", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Subject and HTML required"


class TestVendorEndpoint:

    def test_check(self, client):
        response = client.post("/vendors/check", json={"vendors": [
            {"name": "Brevo", "score": 88, "dpaLink": "https://brevo.com/dpa", "dataLocation": "EU"},
            {"name": "In-house CRM", "isCustom": True},
        ]})
        assert response.status_code == 200
        results = response.json()["results"]
        assert results[0]["links"] == {"dpa": "https://brevo.com/dpa", "privacy": None}
        assert results[0]["actionItems"] == ["Download and review Data Processing Agreement"]
        assert results[1]["score"] == 50
        assert results[1]["details"][0]["label"] == "Analysis Incomplete"

    def test_vendors_required(self, client):
        response = client.post("/vendors/check", json={})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid vendors provided"
