import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from recruitai.errors import ConfigurationError


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="RecruitAI")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # gateway credential, never defaulted
    GEMINI_API_KEY: str | None = None
    # offline echo client instead of Gemini
    USE_ECHO: bool = Field(default=False)
    HTTP_TIMEOUT_SECONDS: float = Field(default=120.0, gt=0)

    # chat
    HISTORY_WINDOW: int = Field(default=10, ge=0)
    # in-process session map: least recently used sessions go first, idle ones expire
    MAX_CHAT_SESSIONS: int = Field(default=1000, gt=0)
    CHAT_SESSION_TTL_SECONDS: float = Field(default=3600.0, gt=0)

    # media
    MAX_VIDEO_MB: int = Field(default=20, gt=0)
    VIDEO_POLL_SECONDS: float = Field(default=5.0, gt=0)
    # None polls until the operation finishes
    VIDEO_TIMEOUT_SECONDS: float | None = Field(default=600.0, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )

    @property
    def app_name(self) -> str:
        return self.APP_NAME

    @property
    def max_video_bytes(self) -> int:
        return self.MAX_VIDEO_MB * 1024 * 1024

    def require_api_key(self) -> str:
        """Return the Gemini key or fail loudly; there is no built-in fallback."""
        key = (self.GEMINI_API_KEY or "").strip()
        if not key:
            raise ConfigurationError(
                "GEMINI_API_KEY is not set. Export it or add it to .env.dev "
                "(or set USE_ECHO=1 for the offline client)."
            )
        return key


settings = Settings()
