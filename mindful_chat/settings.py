from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    db_url: str
    gemini_api_key: str
    gemini_model: str = Field(default="gemini-2.0-flash")
    gemini_api_base: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    gemini_timeout_seconds: float = Field(default=20.0, gt=0)

    chat_context_limit: int = Field(default=10, ge=1)
    chat_history_limit: int = Field(default=50, ge=1)
    default_language: str = Field(default="en")

    auth_jwt_secret: str | None = Field(default=None)
    auth_jwt_algorithm: str = Field(default="HS256")
    auth_jwt_audience: str | None = Field(default="authenticated")

    # Usage limits and the premium paywall are switched off in production.
    enforce_limits: bool = Field(default=False)
    premium_gating: bool = Field(default=False)
    free_daily_message_limit: int = Field(default=10, ge=1)
    premium_user_ids: list[str] = Field(default_factory=list)

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

config = Config() # type: ignore
