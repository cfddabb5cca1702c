"""Evaluation orchestrator: sequences one photo evaluation.

Flow:
    image (data URL / base64)
      ├─ Received     decode_image()            → ImagePayload
      ├─ Invoking     invoke_model(prompt, img) → raw text
      ├─ Validating   parse_model_response()    → ModelJudgment
      ├─ Aggregating  compute_final_score() + select_tier()
      ├─ Counting     record_tier_hit()         (best effort, never fails the request)
      └─ Completed                              → EvaluationResult

Any failure before Counting raises EvaluationFailed(kind, state, message).
"""

import logging
from collections.abc import Awaitable, Callable

from models.schemas.evaluation import EvaluationResult, ModelJudgment
from models.schemas.scoring_config import REFERENCE_CONFIG, ScoringConfig
from services.errors import (
    EvaluationFailed,
    EvaluationState,
    FailureKind,
    InvalidImageError,
    MissingInputError,
    ModelOutputError,
    NotFoundWarning,
    UpstreamError,
)
from services.hit_store import TierHitStore
from services.image_payload import ImagePayload, decode_image
from services.pipeline.hit_counter import record_tier_hit
from services.pipeline.response_validator import parse_model_response
from services.pipeline.score_aggregator import compute_final_score
from services.pipeline.tier_selector import select_tier
from services.prompt_builder import build_evaluation_prompt

logger = logging.getLogger(__name__)

ModelInvoker = Callable[[str, ImagePayload], Awaitable[str]]


def score_judgment(judgment: ModelJudgment, config: ScoringConfig) -> tuple[float, str]:
    """Final score and tier for a validated judgment. Pure."""
    final_score = compute_final_score(judgment.scores(), config)
    return final_score, select_tier(final_score, config)


async def evaluate_photo(
    image: object,
    *,
    invoke_model: ModelInvoker,
    hit_store: TierHitStore,
    config: ScoringConfig = REFERENCE_CONFIG,
    max_bytes: int = 5 * 1024 * 1024,
    default_mime_type: str = "image/jpeg",
    language: str = "Korean",
) -> EvaluationResult:
    """Run one evaluation end to end and return its result."""

    # --- Received ---
    state = EvaluationState.RECEIVED
    try:
        payload = decode_image(image, max_bytes=max_bytes, default_mime_type=default_mime_type)
    except MissingInputError as e:
        raise EvaluationFailed(FailureKind.MISSING_INPUT, state, str(e)) from e
    except InvalidImageError as e:
        raise EvaluationFailed(FailureKind.INVALID_INPUT, state, str(e)) from e

    # --- Invoking ---
    state = _advance(state, EvaluationState.INVOKING)
    prompt = build_evaluation_prompt(config, language)
    try:
        text = await invoke_model(prompt, payload)
    except UpstreamError as e:
        raise EvaluationFailed(FailureKind.UPSTREAM_ERROR, state, str(e)) from e

    # --- Validating ---
    state = _advance(state, EvaluationState.VALIDATING)
    try:
        judgment = parse_model_response(text)
    except ModelOutputError as e:
        raise EvaluationFailed(FailureKind.INVALID_MODEL_OUTPUT, state, str(e)) from e

    # --- Aggregating ---
    state = _advance(state, EvaluationState.AGGREGATING)
    final_score, tier = score_judgment(judgment, config)
    result = EvaluationResult(judgment=judgment, final_score=final_score, tier=tier)

    # --- Counting ---
    state = _advance(state, EvaluationState.COUNTING)
    try:
        await record_tier_hit(hit_store, tier)
    except NotFoundWarning as w:
        logger.warning("Tier hit not recorded: %s", w)
    except Exception:
        logger.exception("Tier hit store failed while recording %s", tier)

    _advance(state, EvaluationState.COMPLETED)
    logger.info("Photo evaluated: final_score=%.1f tier=%s", final_score, tier)
    return result


def _advance(current: EvaluationState, nxt: EvaluationState) -> EvaluationState:
    logger.debug("Evaluation state: %s -> %s", current.value, nxt.value)
    return nxt
