"""
API Integration Tests — Endpoint Verification

Tests every public API endpoint using FastAPI's TestClient.

These tests catch:
  - Schema mismatches (response model vs actual data)
  - Route registration issues
  - Middleware/dependency injection bugs
  - Status code regressions (400 / 422 / 500)
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from grantcraft import __version__

from tests.conftest import STRONG_DRAFT, UNRELATED_DRAFT


# --- Fixtures ---

@pytest.fixture(scope="module")
def client():
    """Create a test client for the GrantCraft API."""
    from api.main import app
    with TestClient(app) as c:
        yield c


# ============================================================
# HEALTH & META
# ============================================================

class TestHealth:
    """Verify /health returns correct structure."""

    def test_health_returns_200(self, client):
        r = client.get("/health")
        assert r.status_code == 200

    def test_health_fields(self, client):
        data = client.get("/health").json()
        assert data["status"] == "operational"
        assert data["schemes"] == ["horizon_europe_ria_ia"]
        assert data["signal_count"] == 22
        assert data["version"] == __version__

    def test_security_headers(self, client):
        r = client.get("/health")
        assert r.headers["X-Content-Type-Options"] == "nosniff"
        assert r.headers["X-Frame-Options"] == "DENY"
        assert "X-GrantCraft-Version" in r.headers


# ============================================================
# REVIEW
# ============================================================

class TestReview:
    """POST /review — scoring through the HTTP boundary."""

    def test_strong_draft_passes(self, client):
        r = client.post("/review", json={"draftContent": STRONG_DRAFT})
        assert r.status_code == 200
        report = r.json()["report"]
        assert report["overallPassed"] is True
        assert report["schemeId"] == "horizon_europe_ria_ia"
        assert report["maxPossibleScore"] == 15.0

    def test_response_schema_fields(self, client):
        r = client.post("/review", json={"draftContent": STRONG_DRAFT, "draftId": "draft-42"})
        data = r.json()
        assert data["draftId"] == "draft-42"
        report = data["report"]
        for key in (
            "schemeName", "rubricVersion", "overallScore", "minOverallScore",
            "criteria", "draftWordCount", "draftSectionCount",
            "missingRequired", "markdownReport",
        ):
            assert key in report
        criterion = report["criteria"][0]
        assert criterion["criterionId"] == "excellence"
        assert len(criterion["signals"]) == 7

    def test_signal_structure(self, client):
        r = client.post("/review", json={"draftContent": STRONG_DRAFT})
        signal = r.json()["report"]["criteria"][1]["signals"][0]
        assert signal["signalId"] == "outcomes_linked"
        assert 0.0 <= signal["confidence"] <= 1.0
        assert len(signal["evidence"]) <= 3
        assert signal["requiredForThreshold"] is True
        assert signal["sectionHint"] == "§2.1"

    def test_unrelated_draft_below_threshold(self, client):
        r = client.post("/review", json={"draftContent": UNRELATED_DRAFT})
        assert r.status_code == 200
        report = r.json()["report"]
        assert report["overallScore"] == 0.0
        assert report["overallPassed"] is False

    def test_explicit_scheme(self, client):
        r = client.post(
            "/review",
            json={"draftContent": STRONG_DRAFT, "schemeId": "horizon_europe_ria_ia"},
        )
        assert r.status_code == 200

    def test_same_draft_same_report(self, client):
        first = client.post("/review", json={"draftContent": STRONG_DRAFT}).json()
        second = client.post("/review", json={"draftContent": STRONG_DRAFT}).json()
        assert first == second

    def test_short_draft_rejected(self, client):
        r = client.post("/review", json={"draftContent": "   Too short.   "})
        assert r.status_code == 422
        assert "too short" in r.json()["detail"]

    def test_whitespace_draft_rejected(self, client):
        r = client.post("/review", json={"draftContent": " " * 200})
        assert r.status_code == 422

    def test_missing_draft_rejected(self, client):
        r = client.post("/review", json={"schemeId": "horizon_europe_ria_ia"})
        assert r.status_code == 400
        assert "draftContent" in r.json()["detail"]

    def test_malformed_json_rejected(self, client):
        r = client.post(
            "/review",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert r.status_code == 400

    def test_wrong_type_rejected(self, client):
        r = client.post("/review", json={"draftContent": 12345})
        assert r.status_code == 400

    def test_malformed_scheme_id_rejected(self, client):
        r = client.post("/review", json={"draftContent": STRONG_DRAFT, "schemeId": "Bad Scheme!"})
        assert r.status_code == 400

    def test_unknown_scheme_rejected(self, client):
        r = client.post("/review", json={"draftContent": STRONG_DRAFT, "schemeId": "nsf_career"})
        assert r.status_code == 400
        assert "Unknown scheme" in r.json()["detail"]


class TestInternalErrors:
    """Unexpected failures become a generic 500 without internals."""

    def test_engine_failure_returns_500(self, monkeypatch):
        import api.main

        def explode(*args, **kwargs):
            raise RuntimeError("secret internal state")

        monkeypatch.setattr(api.main, "review_draft", explode)
        with TestClient(api.main.app, raise_server_exceptions=False) as c:
            r = c.post("/review", json={"draftContent": STRONG_DRAFT})
        assert r.status_code == 500
        assert "secret" not in r.text
        assert r.json()["detail"].startswith("Internal server error")


# ============================================================
# RUBRICS
# ============================================================

class TestSchemes:

    def test_list_schemes(self, client):
        data = client.get("/schemes").json()
        assert data["defaultScheme"] == "horizon_europe_ria_ia"
        scheme = data["schemes"][0]
        assert scheme["schemeId"] == "horizon_europe_ria_ia"
        assert scheme["minOverallScore"] == 10.0
        assert [c["id"] for c in scheme["criteria"]] == [
            "excellence", "impact", "implementation",
        ]

    def test_list_signals(self, client):
        r = client.get("/schemes/horizon_europe_ria_ia/signals")
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 22
        assert data["signals"][0]["id"] == "objectives_listed"
        assert "check" not in data["signals"][0]

    def test_unknown_scheme_signals_404(self, client):
        r = client.get("/schemes/nsf_career/signals")
        assert r.status_code == 404


# ============================================================
# AUTH
# ============================================================

class TestAuth:

    def test_verify_key(self):
        from grantcraft.auth import load_key_hashes, verify_key
        hashes = load_key_hashes("gc_alpha, gc_beta ,")
        assert len(hashes) == 2
        assert verify_key("gc_alpha", hashes)
        assert verify_key("gc_beta", hashes)
        assert not verify_key("gc_gamma", hashes)
        assert not verify_key(None, hashes)
        assert not verify_key("", hashes)

    def test_generated_key_format(self):
        from grantcraft.auth import generate_api_key
        key = generate_api_key()
        assert key.startswith("gc_")
        assert key != generate_api_key()

    def test_missing_key_401_when_enabled(self, client, monkeypatch):
        monkeypatch.setattr("grantcraft.auth.AUTH_ENABLED", True)
        r = client.get("/schemes")
        assert r.status_code == 401

    def test_invalid_key_403_when_enabled(self, client, monkeypatch):
        monkeypatch.setattr("grantcraft.auth.AUTH_ENABLED", True)
        r = client.get("/schemes", headers={"X-API-Key": "gc_wrong"})
        assert r.status_code == 403

    def test_health_public_when_enabled(self, client, monkeypatch):
        monkeypatch.setattr("grantcraft.auth.AUTH_ENABLED", True)
        assert client.get("/health").status_code == 200
