from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        enable_decoding=False,
    )

    ENV: str = "dev"
    CORS_ALLOW_ORIGINS: list[str] = ["*"]

    POLYMARKET_GAMMA_URL: str = "https://gamma-api.polymarket.com"
    POLY_TIMEOUT_SECONDS: float = 15.0
    POLY_FETCH_ATTEMPTS: int = 1

    RISK_CACHE_TTL_SECONDS: int = 60
    RISK_MARKETS_FILE: str | None = None

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    HTTPX_SLOW_REQUEST_THRESHOLD_SECONDS: float = 2.0

    @field_validator("CORS_ALLOW_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if value is None:
            return value
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(",") if part.strip()]
            return parts
        return value

    @field_validator("RISK_MARKETS_FILE", mode="before")
    @classmethod
    def _none_str_to_none(cls, value):
        if value is None:
            return None
        if isinstance(value, str) and value.strip().lower() in {"", "none", "null"}:
            return None
        return value

settings = Settings()
