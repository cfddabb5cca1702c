import json

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_hit_store, get_model_invoker
from api.router import limiter
from config import settings
from conftest import SAMPLE_DATA_URL, SAMPLE_FINAL_SCORE, SAMPLE_JUDGMENT, SAMPLE_TIER, FakeModel
from main import app
from models.schemas.scoring_config import REFERENCE_CONFIG
from services.errors import TierHitStoreError, UpstreamError
from services.hit_store import MemoryTierHitStore

client = TestClient(app)


@pytest.fixture(autouse=True)
def _collaborators():
    """Swap Gemini and the hit store for in-process fakes."""
    state = {
        "model": FakeModel(),
        "store": MemoryTierHitStore(REFERENCE_CONFIG.tier_labels),
    }
    app.dependency_overrides[get_model_invoker] = lambda: state["model"]
    app.dependency_overrides[get_hit_store] = lambda: state["store"]
    limiter.reset()
    yield state
    app.dependency_overrides.clear()
    limiter.reset()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "gemini_configured" in data
    assert data["hit_store_backend"] == settings.hit_store_backend


def test_criteria():
    response = client.get("/criteria")
    assert response.status_code == 200
    data = response.json()
    assert [c["key"] for c in data["criteria"]] == list(REFERENCE_CONFIG.categories)
    assert sum(c["weight_percent"] for c in data["criteria"]) == 100
    assert data["criteria"][0] == {"key": "focus", "display_name": "초점 정확도", "weight_percent": 25}
    assert [t["min_score"] for t in data["tiers"]] == [96, 86, 71, 51, 26, 0]


def test_evaluate_photo(_collaborators):
    response = client.post("/evaluatePhoto", json={"image": SAMPLE_DATA_URL})
    assert response.status_code == 200
    data = response.json()
    for category in REFERENCE_CONFIG.categories:
        assert data[category] == SAMPLE_JUDGMENT[category]
    assert data["comment"] == SAMPLE_JUDGMENT["comment"]
    assert data["final_score"] == SAMPLE_FINAL_SCORE
    assert data["tier"] == SAMPLE_TIER
    assert len(_collaborators["model"].calls) == 1


def test_evaluate_photo_records_tier_hit():
    client.post("/evaluatePhoto", json={"image": SAMPLE_DATA_URL})
    client.post("/evaluatePhoto", json={"image": SAMPLE_DATA_URL})

    response = client.get("/tierHits")
    assert response.status_code == 200
    hits = response.json()["hits"]
    assert hits[SAMPLE_TIER] == 2
    assert sum(hits.values()) == 2


@pytest.mark.parametrize("body", [{}, {"image": ""}, {"image": None}])
def test_evaluate_photo_requires_image(body, _collaborators):
    response = client.post("/evaluatePhoto", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Image is required."}
    assert _collaborators["model"].calls == []


def test_evaluate_photo_without_body():
    response = client.post("/evaluatePhoto")
    assert response.status_code == 400
    assert response.json() == {"error": "Image is required."}


def test_evaluate_photo_rejects_bad_base64():
    response = client.post("/evaluatePhoto", json={"image": "data:image/jpeg;base64,!!!"})
    assert response.status_code == 400
    assert "base64" in response.json()["error"]


def test_evaluate_photo_upstream_error(_collaborators):
    _collaborators["model"] = FakeModel(error=UpstreamError("Gemini API error: 429 quota"))
    response = client.post("/evaluatePhoto", json={"image": SAMPLE_DATA_URL})
    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Internal Server Error"
    assert "429 quota" in data["message"]


def test_evaluate_photo_invalid_model_output(_collaborators):
    _collaborators["model"] = FakeModel(text="not json at all")
    response = client.post("/evaluatePhoto", json={"image": SAMPLE_DATA_URL})
    assert response.status_code == 500
    assert response.json()["error"] == "Internal Server Error"
    assert "JSON" in response.json()["message"]


def test_evaluate_photo_accepts_fenced_model_output(_collaborators):
    fenced = "```json\n" + json.dumps(SAMPLE_JUDGMENT, ensure_ascii=False) + "\n```"
    _collaborators["model"] = FakeModel(text=fenced)
    response = client.post("/evaluatePhoto", json={"image": SAMPLE_DATA_URL})
    assert response.status_code == 200
    assert response.json()["final_score"] == SAMPLE_FINAL_SCORE


def test_evaluate_photo_survives_missing_tier_record(_collaborators):
    _collaborators["store"] = MemoryTierHitStore()
    response = client.post("/evaluatePhoto", json={"image": SAMPLE_DATA_URL})
    assert response.status_code == 200
    assert response.json()["tier"] == SAMPLE_TIER


def test_evaluate_photo_rate_limited():
    allowed = int(settings.rate_limit.split("/")[0])
    for _ in range(allowed):
        assert client.post("/evaluatePhoto", json={}).status_code == 400
    assert client.post("/evaluatePhoto", json={}).status_code == 429


def test_cors_allows_known_origin():
    origin = settings.cors_origins[0]
    response = client.options(
        "/evaluatePhoto",
        headers={"Origin": origin, "Access-Control-Request-Method": "POST"},
    )
    assert response.headers.get("access-control-allow-origin") == origin


def test_cors_rejects_unknown_origin():
    response = client.options(
        "/evaluatePhoto",
        headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "POST"},
    )
    assert "access-control-allow-origin" not in response.headers


class UnreadableStore(MemoryTierHitStore):
    async def counts(self):
        raise TierHitStoreError("Firestore read failed: 503 unavailable")


def test_tier_hits_store_error(_collaborators):
    _collaborators["store"] = UnreadableStore()
    response = client.get("/tierHits")
    assert response.status_code == 500
    assert response.json() == {
        "error": "Internal Server Error",
        "message": "Firestore read failed: 503 unavailable",
    }


@pytest.mark.parametrize("image", [123, ["data:image/png;base64,AAAA"], {"data": "AAAA"}])
def test_evaluate_photo_rejects_non_string_image(image, _collaborators):
    response = client.post("/evaluatePhoto", json={"image": image})
    assert response.status_code == 400
    assert "base64 string" in response.json()["error"]
    assert _collaborators["model"].calls == []


def test_evaluate_photo_rejects_malformed_body(_collaborators):
    response = client.post(
        "/evaluatePhoto",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body"
    assert _collaborators["model"].calls == []
