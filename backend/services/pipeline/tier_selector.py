"""Map a final score to its named tier."""

from models.schemas.scoring_config import ScoringConfig


def select_tier(final_score: float, config: ScoringConfig) -> str:
    """Label of the first tier (highest first) whose min_score <= final_score.

    Exact boundaries resolve to the higher tier. The bottom tier starts at 0,
    so every score in [0, 100] matches.
    """
    if not 0 <= final_score <= 100:
        raise ValueError(f"final_score must be within [0, 100], got {final_score}")
    for tier in config.tiers:
        if tier.min_score <= final_score:
            return tier.label
    raise ValueError(f"No tier matches score {final_score}")
