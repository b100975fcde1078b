from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4.1-mini"
    DB_URL: str = "sqlite:///./data/ideaprint.db"
    DATA_DIR: str = "./data"
    EXPORT_DIR: str = "./exports"
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    AUTH_TOKEN_URL: str | None = None
    AUTH_CLIENT_ID: str | None = None
    ADMIN_USERNAME: str | None = None
    ADMIN_PASSWORD: str | None = None
    RADAR_ACTIVATION_RADIUS: float = 20.0
    RADAR_ANIMATION_SECONDS: float = 1.5
    cors_allow_origins: List[str] = ["*"]
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

settings = Settings()
