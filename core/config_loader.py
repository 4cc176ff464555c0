from typing import List

from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = "sqlite:///./rota.db"
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"

    # "today" for the active/old rota tabs is evaluated here
    BUSINESS_TIMEZONE: str = "Europe/London"

    LOG_LEVEL: str = "INFO"


settings = Settings()
