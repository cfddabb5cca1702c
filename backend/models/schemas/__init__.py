"""Pydantic contracts shared by the evaluation pipeline stages."""

from models.schemas.evaluation import CategoryJudgment, EvaluationResult, ModelJudgment
from models.schemas.scoring_config import (
    CATEGORIES,
    REFERENCE_CONFIG,
    ScoringConfig,
    TierThreshold,
)

__all__ = [
    "CATEGORIES",
    "REFERENCE_CONFIG",
    "CategoryJudgment",
    "EvaluationResult",
    "ModelJudgment",
    "ScoringConfig",
    "TierThreshold",
]
