"""Shared test configuration, sample model output and fake collaborators."""

import base64
import json

import pytest

from models.schemas.scoring_config import REFERENCE_CONFIG
from services.hit_store import MemoryTierHitStore

# 4,3,3,4,2,5 -> weighted sum 3.65 -> final score 73.0
SAMPLE_JUDGMENT = {
    "focus": {"score": 4, "reason": "피사체에 초점이 잘 맞았습니다."},
    "exposure": {"score": 3, "reason": "하이라이트가 약간 날아갔습니다."},
    "color": {"score": 3, "reason": "색온도가 다소 차갑습니다."},
    "composition": {"score": 4, "reason": "삼분할 구도가 안정적입니다."},
    "resolution": {"score": 2, "reason": "암부에 노이즈가 보입니다."},
    "face_detection": {"score": 5, "reason": "얼굴이 선명하게 인식됩니다."},
    "comment": "전반적으로 괜찮은 인물 사진입니다.",
}
SAMPLE_FINAL_SCORE = 73.0
SAMPLE_TIER = "📸 감성을 아는 실력자"

SAMPLE_IMAGE_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
SAMPLE_DATA_URL = "data:image/png;base64," + base64.b64encode(SAMPLE_IMAGE_BYTES).decode()


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "concurrency: simulates concurrent writers against the hit store"
    )


class FakeModel:
    """Stands in for the Gemini call: records calls, returns canned text."""

    def __init__(self, text: str | None = None, error: Exception | None = None):
        self.text = text if text is not None else json.dumps(SAMPLE_JUDGMENT, ensure_ascii=False)
        self.error = error
        self.calls = []

    async def __call__(self, prompt, image):
        self.calls.append((prompt, image))
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def fake_model():
    return FakeModel()


@pytest.fixture
def memory_store():
    return MemoryTierHitStore(REFERENCE_CONFIG.tier_labels)
