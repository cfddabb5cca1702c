"""Shared dependencies for API routes."""

from models.schemas.scoring_config import REFERENCE_CONFIG, ScoringConfig
from services import gemini_client
from services.hit_store import TierHitStore, get_hit_store as _get_store
from services.pipeline.orchestrator import ModelInvoker


def get_model_invoker() -> ModelInvoker:
    return gemini_client.generate_text


def get_hit_store() -> TierHitStore:
    return _get_store()


def get_scoring_config() -> ScoringConfig:
    return REFERENCE_CONFIG
