from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field
from typing import List

class Settings(BaseSettings):
    # OpenAI
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    MOCK_MODE: bool = False

    # Input budgets
    MAX_UPLOAD_MB: int = 20
    MAX_TEXT_CHARS: int = 100_000

    # Flashcard viewer: length of each transition phase
    TRANSITION_MS: int = 300

    # Safety/abuse knobs
    RATE_LIMIT: str = "30/minute"

    # CORS
    ALLOW_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    # Optional extra frontend
    FRONTEND_ORIGIN: str | None = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024

    @property
    def transition_seconds(self) -> float:
        return self.TRANSITION_MS / 1000


class ConfigReport(BaseModel):
    ok: bool
    problems: List[str] = Field(default_factory=list)


def check_config(s: Settings) -> ConfigReport:
    """Validate settings once at startup instead of failing on import."""
    problems: List[str] = []
    if not s.MOCK_MODE and not (s.OPENAI_API_KEY or "").strip():
        problems.append("OPENAI_API_KEY is not set (set it or enable MOCK_MODE).")
    if s.MAX_UPLOAD_MB <= 0:
        problems.append("MAX_UPLOAD_MB must be positive.")
    if s.MAX_TEXT_CHARS <= 0:
        problems.append("MAX_TEXT_CHARS must be positive.")
    if s.TRANSITION_MS < 0:
        problems.append("TRANSITION_MS must not be negative.")
    return ConfigReport(ok=not problems, problems=problems)


settings = Settings()
if settings.FRONTEND_ORIGIN:
    settings.ALLOW_ORIGINS.append(settings.FRONTEND_ORIGIN)
