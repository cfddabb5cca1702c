"""Prompt template for the Gemini photo evaluation call."""

from models.schemas.scoring_config import ScoringConfig


def build_evaluation_prompt(config: ScoringConfig, language: str = "Korean") -> str:
    """Fixed evaluation instruction sent alongside every image.

    The model only returns per-category scores and reasons; the final score
    is computed locally from ``config.weights``.
    """
    criteria = "\n".join(
        f"- {category}: {config.display_name(category)}" for category in config.categories
    )
    shape = ",\n".join(
        f'  "{category}": {{ "score": <0-5>, "reason": "..." }}' for category in config.categories
    )

    return f"""You are a professional photo quality evaluator.

Evaluate the image using the {len(config.categories)} criteria below. For each, score from 0 to 5 (steps of 0.5 allowed) and explain briefly in {language}.
Do NOT hesitate to assign very low scores (even 0 or 1) if the quality is clearly poor.
Avoid assigning 4 or 5 to all items unless the image is truly outstanding.

CRITERIA:
{criteria}

SCORING GUIDELINES:
- 5: Excellent
- 4: Good
- 3: Average
- 2: Needs improvement
- 1: Poor
- 0: Unacceptable

Do NOT calculate the final_score.
Only return the {len(config.categories)} category scores (0~5) with short {language} explanations, and one overall comment.

Respond with raw JSON only. No markdown, no extra text.

{{
{shape},
  "comment": "..."
}}"""
