"""
Service configuration.

Values are read from the process environment (or a local .env file).
Import the module-level `settings` object rather than instantiating
Settings again, so every module sees the same values.
"""

import json

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ── Runtime ────────────────────────────────────────────────────────────
    environment: str = "development"
    log_level: str = "INFO"
    api_version: str = "1.0.0"

    # ── Batch / report limits ──────────────────────────────────────────────
    batch_max_records: int = 5000

    # Zone used for "now" in period filters; aware timestamps are shifted
    # into it before the comparison.
    report_timezone: str = "America/Sao_Paulo"

    # ── CORS ───────────────────────────────────────────────────────────────
    # Kept as a raw string: ALLOWED_ORIGINS may be a single URL, a
    # comma-separated list or a JSON array.  Ignored in development.
    allowed_origins_raw: str = Field(default="", validation_alias="allowed_origins")

    @property
    def allowed_origins(self) -> list[str]:
        raw = self.allowed_origins_raw.strip()
        if not raw:
            return []
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                return [str(origin) for origin in parsed]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


settings = Settings()
