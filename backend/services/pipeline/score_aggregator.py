"""Deterministic final score from the six category scores."""

import logging
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from models.schemas.scoring_config import ScoringConfig

logger = logging.getLogger(__name__)

# Max weighted sum is 5 (weights sum to 1, max score 5); x20 maps it to 100.
SCALE = Decimal(20)
_ONE_DECIMAL = Decimal("0.1")


def compute_final_score(scores: Mapping[str, float], config: ScoringConfig) -> float:
    """Weighted sum of category scores rescaled to 0-100, one decimal place.

    Evaluated in decimal arithmetic and rounded half-up, so 2.25 -> 2.3 and
    float noise never shifts the result. A category missing from ``scores``
    contributes zero.
    """
    total = Decimal(0)
    for category in config.categories:
        score = scores.get(category)
        if score is None:
            logger.warning("Category %s missing from scores, counting as 0", category)
            continue
        total += Decimal(str(config.weights[category])) * Decimal(str(score))

    final = (total * SCALE).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return float(final)
