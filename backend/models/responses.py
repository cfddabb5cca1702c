from pydantic import BaseModel

from models.schemas.evaluation import CategoryJudgment, EvaluationResult


class EvaluationResponse(BaseModel):
    focus: CategoryJudgment
    exposure: CategoryJudgment
    color: CategoryJudgment
    composition: CategoryJudgment
    resolution: CategoryJudgment
    face_detection: CategoryJudgment
    comment: str = ""
    final_score: float = 0.0
    tier: str = ""

    @classmethod
    def from_result(cls, result: EvaluationResult) -> "EvaluationResponse":
        return cls(
            **result.judgment.model_dump(),
            final_score=result.final_score,
            tier=result.tier,
        )


class ErrorResponse(BaseModel):
    error: str
    message: str | None = None


class CriterionInfo(BaseModel):
    key: str
    display_name: str
    weight_percent: int = 0


class TierInfo(BaseModel):
    min_score: float
    label: str


class CriteriaResponse(BaseModel):
    criteria: list[CriterionInfo] = []
    tiers: list[TierInfo] = []


class TierHitsResponse(BaseModel):
    hits: dict[str, int] = {}
