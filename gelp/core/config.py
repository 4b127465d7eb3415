from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "GELP API"

    DB_URL: str = "sqlite+aiosqlite:///./gelp.db"
    DB_ECHO: bool = False
    # seconds a connection waits on a locked row/database before giving up
    DB_LOCK_TIMEOUT_SECONDS: float = 5.0

    SALE_TIMEOUT_SECONDS: float = 10.0
    # calendar used by the "sales today" dashboard counter
    REPORT_TIMEZONE: str = "UTC"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]


settings = Settings()
