"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # LLM (resume parsing)
    LLM_PROVIDER: str = "openai"
    LLM_MODEL: str = "gpt-4o"
    LLM_API_KEY: str = ""

    # Firebase service account
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_CLIENT_EMAIL: str = ""
    FIREBASE_PRIVATE_KEY: str = ""

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Resume upload
    MAX_RESUME_BYTES: int = 10 * 1024 * 1024
    DEFAULT_BILL_RATE: int = 100
    DEFAULT_PAY_RATE: int = 70

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def cors_origins(self) -> list[str]:
        """``ALLOWED_ORIGINS`` as a list; ``"*"`` allows any origin."""
        raw = self.ALLOWED_ORIGINS.strip()
        if raw == "*":
            return ["*"]
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

    @field_validator("FIREBASE_PRIVATE_KEY")
    @classmethod
    def _unescape_private_key(cls, value: str) -> str:
        # Keys pasted into .env files carry literal "\n" sequences
        return value.replace("\\n", "\n")


settings = Settings()  # type: ignore[call-arg]
