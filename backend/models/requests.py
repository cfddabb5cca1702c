from typing import Any

from pydantic import BaseModel, Field


class EvaluatePhotoRequest(BaseModel):
    # Type is checked by decode_image so a wrong type gets the same error body
    image: Any = Field(None, description="Image as a data URL or bare base64 string")
