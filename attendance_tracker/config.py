"""Application configuration via environment variables."""
from pydantic import field_validator
from pydantic_settings import BaseSettings

# Shared per-event door passwords for the fest.
DEFAULT_EVENT_PASSWORDS: dict[str, str] = {
    "aavishkar": "AAVI2025",
    "cineverse": "CINE2025",
    "stock x stake": "STOCK2025",
    "split or steal": "SPLIT2025",
    "resume relay": "RESUME2025",
    "meme fest": "MEME2025",
    "data loom": "DATA2025",
    "man in middle": "MITM2025",
    "human or ai": "HUMAN2025",
    "escape room": "ESCAPE2025",
    "tech debate": "TECH2025",
    "no keyclick": "NOKEY2025",
    "tech ladder": "LADDER2025",
    "cyber chase": "CYBER2025",
    "decode & dash": "DECODE2025",
    "code relay": "RELAY2025",
    "codewinglet": "WING2025",
}


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./attendance.db"
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"
    EVENT_PASSWORDS: dict[str, str] = DEFAULT_EVENT_PASSWORDS

    # Used by the organizer view when it opens its own HTTP connection
    API_BASE_URL: str = "http://localhost:8000"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"

    @field_validator("EVENT_PASSWORDS")
    @classmethod
    def _lowercase_event_names(cls, value: dict[str, str]) -> dict[str, str]:
        return {name.strip().lower(): password for name, password in value.items()}


settings = Settings()
