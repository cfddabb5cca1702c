"""Decode the ``image`` field of an evaluation request into raw bytes."""

import base64
import binascii
import re
from dataclasses import dataclass

from services.errors import InvalidImageError, MissingInputError

_DATA_URL_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[\w.+-]+=[^;,]*)*)(?P<b64>;base64)?,(?P<data>.*)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    mime_type: str


def decode_image(
    image: object,
    max_bytes: int,
    default_mime_type: str = "image/jpeg",
) -> ImagePayload:
    """Decode a data URL (``data:image/png;base64,...``) or bare base64 string.

    Raises MissingInputError for an absent/blank payload and InvalidImageError
    when the payload is not base64 image data or is larger than ``max_bytes``.
    """
    if image is None or (isinstance(image, str) and not image.strip()):
        raise MissingInputError("Image is required.")
    if not isinstance(image, str):
        raise InvalidImageError("Image must be a data URL or base64 string")

    raw = image.strip()
    mime_type = default_mime_type
    match = _DATA_URL_RE.match(raw)
    if match:
        if not match.group("b64"):
            raise InvalidImageError("Image data URL must be base64 encoded")
        mime_type = (match.group("mime") or default_mime_type).lower()
        raw = match.group("data")
    elif raw.startswith("data:"):
        raise InvalidImageError("Malformed image data URL")

    if not mime_type.startswith("image/"):
        raise InvalidImageError(f"Unsupported content type: {mime_type}")

    # Browsers sometimes line-wrap long base64 strings
    raw = "".join(raw.split())
    try:
        data = base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImageError("Image is not valid base64 data")

    if not data:
        raise InvalidImageError("Image is empty")
    if len(data) > max_bytes:
        raise InvalidImageError(f"Image too large. Max size: {max_bytes // (1024 * 1024)}MB")

    return ImagePayload(data=data, mime_type=mime_type)
