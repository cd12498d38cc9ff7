"""
Application settings.

Credentials double as feature switches: an adapter is planned only when the
values it needs are present. The settings object is built once at startup
and handed to the planner, adapters never read the environment themselves.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class Settings(BaseSettings):
    app_name: str = "AgriScan Analysis API"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    port: int = 8000
    cors_origins: List[str] = ["*"]

    # Vision / plant-health providers
    google_vision_api_key: Optional[str] = None
    plant_id_api_key: Optional[str] = None
    azure_vision_endpoint: Optional[str] = None
    azure_vision_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    groq_model: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    gemini_api_keys: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"

    # Weather
    openweather_api_key: Optional[str] = None
    open_meteo_fallback: bool = True

    provider_timeout_seconds: float = 30.0
    max_upload_bytes: int = MAX_UPLOAD_BYTES

    # Fixes the random filler, for tests and reproducible demos
    synthetic_seed: Optional[int] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def gemini_keys(self) -> List[str]:
        """Return the configured Gemini keys in priority order.

        Accepts GEMINI_API_KEYS (comma or newline separated) or a single
        GEMINI_API_KEY. Only the first whitespace-delimited token of each
        entry is kept so trailing comments never reach a request.
        """
        raw = self.gemini_api_keys or self.gemini_api_key or ""
        keys: List[str] = []
        for chunk in raw.replace(",", "\n").splitlines():
            token = chunk.strip()
            if not token:
                continue
            keys.append(token.split()[0])
        return keys

    @property
    def azure_configured(self) -> bool:
        return bool(self.azure_vision_endpoint and self.azure_vision_key)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
