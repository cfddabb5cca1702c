"""Google Gemini API wrapper for image evaluation calls."""

import asyncio
import logging

from google import genai
from google.genai import types

from config import settings
from services.errors import UpstreamError
from services.image_payload import ImagePayload

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - photo evaluation disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


async def generate_text(prompt: str, image: ImagePayload) -> str:
    """Send the prompt plus inline image to Gemini and return the raw text.

    Raises UpstreamError when the client is not configured, the call fails or
    times out, or the model returns no text. Nothing is retried here.
    """
    client = get_client()
    if client is None:
        raise UpstreamError("Gemini API key is not configured")

    try:
        response = await asyncio.wait_for(
            client.aio.models.generate_content(
                model=settings.gemini_model,
                contents=[
                    prompt,
                    types.Part.from_bytes(data=image.data, mime_type=image.mime_type),
                ],
                config=types.GenerateContentConfig(
                    temperature=settings.gemini_temperature,
                    max_output_tokens=settings.gemini_max_output_tokens,
                ),
            ),
            timeout=settings.gemini_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.error("Gemini call timed out after %.1fs", settings.gemini_timeout_seconds)
        raise UpstreamError(
            f"Gemini call timed out after {settings.gemini_timeout_seconds:.0f}s"
        )
    except Exception as e:
        logger.error("Gemini API error: %s", e)
        raise UpstreamError(f"Gemini API error: {e}") from e

    text = response.text
    if not text or not text.strip():
        raise UpstreamError("Gemini returned an empty response")

    logger.debug("Gemini response: %s", text)
    return text
