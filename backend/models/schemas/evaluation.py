"""Per-request evaluation records: validated model judgment and final result."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

Score = Annotated[float, Field(strict=True, ge=0, le=5, multiple_of=0.5)]
Reason = Annotated[str, StringConstraints(strict=True, strip_whitespace=True, min_length=1)]


class CategoryJudgment(BaseModel):
    """Model's score (0-5 in 0.5 steps) and explanation for one category."""
    model_config = ConfigDict(frozen=True)

    score: Score
    reason: Reason


class ModelJudgment(BaseModel):
    """Validated model output: one judgment per category plus a comment.

    ``final_score`` is deliberately absent; it is always computed locally.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    focus: CategoryJudgment
    exposure: CategoryJudgment
    color: CategoryJudgment
    composition: CategoryJudgment
    resolution: CategoryJudgment
    face_detection: CategoryJudgment
    comment: Annotated[str, Field(strict=True)]

    def scores(self) -> dict[str, float]:
        return {
            name: getattr(self, name).score
            for name in type(self).model_fields
            if name != "comment"
        }


class EvaluationResult(BaseModel):
    """Outcome of one completed evaluation. Never persisted."""
    model_config = ConfigDict(frozen=True)

    judgment: ModelJudgment
    final_score: float = Field(ge=0, le=100)
    tier: str
