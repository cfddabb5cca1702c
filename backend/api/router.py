import logging
from decimal import Decimal

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_hit_store, get_model_invoker, get_scoring_config
from config import settings
from models.requests import EvaluatePhotoRequest
from models.responses import (
    CriteriaResponse,
    CriterionInfo,
    ErrorResponse,
    EvaluationResponse,
    TierHitsResponse,
    TierInfo,
)
from models.schemas.scoring_config import ScoringConfig
from services.errors import EvaluationFailed, FailureKind, TierHitStoreError
from services.hit_store import TierHitStore
from services.pipeline.orchestrator import ModelInvoker, evaluate_photo

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


def _error(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, message=message).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
        "hit_store_backend": settings.hit_store_backend,
    }


@router.get("/criteria", response_model=CriteriaResponse)
async def criteria(config: ScoringConfig = Depends(get_scoring_config)):
    return CriteriaResponse(
        criteria=[
            CriterionInfo(
                key=category,
                display_name=config.display_name(category),
                weight_percent=int(Decimal(str(config.weights[category])) * 100),
            )
            for category in config.categories
        ],
        tiers=[TierInfo(min_score=t.min_score, label=t.label) for t in config.tiers],
    )


@router.get("/tierHits", response_model=TierHitsResponse, responses={500: {"model": ErrorResponse}})
async def tier_hits(store: TierHitStore = Depends(get_hit_store)):
    try:
        hits = await store.counts()
    except TierHitStoreError as e:
        logger.error("Reading tier hits failed: %s", e)
        return _error(500, "Internal Server Error", str(e))
    return TierHitsResponse(hits=hits)


@router.post(
    "/evaluatePhoto",
    response_model=EvaluationResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def evaluate(
    request: Request,
    body: EvaluatePhotoRequest | None = None,
    invoke_model: ModelInvoker = Depends(get_model_invoker),
    store: TierHitStore = Depends(get_hit_store),
    config: ScoringConfig = Depends(get_scoring_config),
):
    try:
        result = await evaluate_photo(
            body.image if body else None,
            invoke_model=invoke_model,
            hit_store=store,
            config=config,
            max_bytes=settings.max_upload_bytes,
            default_mime_type=settings.default_image_mime_type,
            language=settings.reason_language,
        )
    except EvaluationFailed as e:
        if e.kind == FailureKind.MISSING_INPUT:
            return _error(400, "Image is required.")
        if e.kind == FailureKind.INVALID_INPUT:
            return _error(400, e.message)
        logger.error("Photo evaluation failed in %s: %s", e.state.value, e.message)
        return _error(500, "Internal Server Error", e.message)
    except Exception as e:
        logger.exception("Photo evaluation failed")
        return _error(500, "Internal Server Error", str(e))

    return EvaluationResponse.from_result(result)
