import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.2
    gemini_max_output_tokens: int = 2048
    gemini_timeout_seconds: float = 60.0
    reason_language: str = "Korean"

    max_upload_size_mb: int = 5
    default_image_mime_type: str = "image/jpeg"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "https://photo-quality-880b6.web.app",
    ]
    rate_limit: str = "10/minute"
    debug: bool = False

    # Tier hit store
    hit_store_backend: str = "memory"  # "memory" | "firestore"
    firestore_project: str = ""  # empty -> use ambient Google Cloud project
    firestore_collection: str = "tier_hits"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
