"""Turn raw Gemini text into a validated ModelJudgment.

The model's output is untrusted: it is parsed as JSON after removing any
markdown code fence, then validated field by field. Nothing here retries or
repairs the text.
"""

import json
import logging
import re

from pydantic import ValidationError

from models.schemas.evaluation import ModelJudgment
from services.errors import ParseError, SchemaError

logger = logging.getLogger(__name__)

_OPEN_FENCE_RE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_CLOSE_FENCE_RE = re.compile(r"\n?```$")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence (any tag, any case)."""
    text = text.strip()
    if text.startswith("```"):
        text = _OPEN_FENCE_RE.sub("", text, count=1)
        text = _CLOSE_FENCE_RE.sub("", text.rstrip(), count=1)
    return text.strip()


def _describe(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e["loc"]) or "<root>"
        parts.append(f"{loc}: {e['msg']}")
    return "; ".join(parts)


def parse_model_response(text: str) -> ModelJudgment:
    """Parse and validate model text.

    Raises ParseError for non-JSON text and SchemaError for JSON that does not
    have exactly the six categories plus ``comment``, or whose scores are not
    in [0, 5] on the 0.5 grid, or whose reasons are empty.
    """
    cleaned = strip_code_fence(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Model response is not valid JSON: %s", e)
        raise ParseError(f"Model response is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise SchemaError(f"Model response must be a JSON object, got {type(parsed).__name__}")

    try:
        return ModelJudgment.model_validate(parsed)
    except ValidationError as e:
        detail = _describe(e)
        logger.warning("Model response failed schema validation: %s", detail)
        raise SchemaError(f"Model response failed schema validation: {detail}") from e
