"""Immutable scoring configuration: criteria, weights and tier thresholds."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

CATEGORIES: tuple[str, ...] = (
    "focus",
    "exposure",
    "color",
    "composition",
    "resolution",
    "face_detection",
)


class TierThreshold(BaseModel):
    """A named band of final scores starting at ``min_score``."""
    model_config = ConfigDict(frozen=True)

    min_score: float = Field(ge=0, le=100)
    label: str = Field(min_length=1)


class ScoringConfig(BaseModel):
    """Process-wide scoring configuration.

    Built once at import (``REFERENCE_CONFIG``) and handed explicitly to the
    aggregator, tier selector and prompt builder. Construction fails with a
    ``ValidationError`` when any invariant below is broken:

    - ``weights`` covers exactly ``categories``, every weight is positive and
      the weights sum to exactly 1 (checked in decimal arithmetic).
    - ``tiers`` is sorted by ``min_score`` strictly descending, labels are
      unique, and exactly one tier starts at 0 so every score resolves.
    """
    model_config = ConfigDict(frozen=True)

    categories: tuple[str, ...] = CATEGORIES
    weights: dict[str, float]
    display_names: dict[str, str] = {}
    tiers: tuple[TierThreshold, ...]

    @model_validator(mode="after")
    def _check_invariants(self) -> "ScoringConfig":
        if set(self.weights) != set(self.categories):
            raise ValueError(
                f"weights must cover exactly {list(self.categories)}, got {sorted(self.weights)}"
            )
        if any(w <= 0 for w in self.weights.values()):
            raise ValueError("weights must be positive")
        total = sum(Decimal(str(w)) for w in self.weights.values())
        if total != 1:
            raise ValueError(f"weights must sum to 1, got {total}")

        unknown = set(self.display_names) - set(self.categories)
        if unknown:
            raise ValueError(f"display names for unknown categories: {sorted(unknown)}")

        mins = [t.min_score for t in self.tiers]
        if any(a <= b for a, b in zip(mins, mins[1:])):
            raise ValueError("tiers must be sorted by min_score strictly descending")
        if mins.count(0) != 1:
            raise ValueError("exactly one tier must start at 0")
        labels = [t.label for t in self.tiers]
        if len(set(labels)) != len(labels):
            raise ValueError("tier labels must be unique")
        return self

    @property
    def tier_labels(self) -> list[str]:
        return [t.label for t in self.tiers]

    def display_name(self, category: str) -> str:
        return self.display_names.get(category, category)


REFERENCE_CONFIG = ScoringConfig(
    weights={
        "focus": 0.25,
        "exposure": 0.15,
        "color": 0.15,
        "composition": 0.20,
        "resolution": 0.10,
        "face_detection": 0.15,
    },
    display_names={
        "focus": "초점 정확도",
        "exposure": "노출 적정성",
        "color": "색감 밸런스",
        "composition": "구도 안정성",
        "resolution": "해상도/노이즈",
        "face_detection": "얼굴 인식 정확도",
    },
    tiers=(
        TierThreshold(min_score=96, label="🎨 사진 예술의 거장"),
        TierThreshold(min_score=86, label="📷 감각이 뛰어난 전문가"),
        TierThreshold(min_score=71, label="📸 감성을 아는 실력자"),
        TierThreshold(min_score=51, label="🔍 성장 중인 사진가"),
        TierThreshold(min_score=26, label="🤳 아직은 미숙한 도전자"),
        TierThreshold(min_score=0, label="💩 기준 미달의 똥손"),
    ),
)
