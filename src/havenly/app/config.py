"""Application configuration via Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

# Resolve .env from the project root regardless of CWD
_ENV_FILE = Path(__file__).resolve().parents[3] / ".env"


class Settings(BaseSettings):
    """Central configuration loaded from environment variables / .env file."""

    # Empty: a throwaway SQLite file created at startup and deleted at shutdown
    database_url: str = ""
    seed_demo_data: bool = True

    # AI
    gemini_api_key: str = ""
    gemini_model: str = "gemini-3-flash-preview"

    # Auth / JWT
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 1440
    demo_password: str = "demo"

    # Booking fees (fixed policy, not per property)
    booking_tax_rate: float = 0.10
    booking_commission_rate: float = 0.05

    # Payment simulator
    payment_delay_seconds: float = 1.5
    payment_timeout_seconds: float = 10.0

    # CORS / Frontend
    cors_origins: str = "http://localhost:3000"

    # General
    debug: bool = True

    model_config = {"env_file": str(_ENV_FILE), "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list.

        In debug mode, returns ["*"] to allow any origin.
        """
        if self.debug:
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
