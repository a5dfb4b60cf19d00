from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    ENVIRONMENT: str = "development"  # "development" or "production"

    DATABASE_URL: str

    # Where onboarding analytics events go: the app log or the onboarding_event table
    ANALYTICS_SINK: Literal["log", "database"] = "log"

    CORS_ORIGINS: List[str] = ["http://localhost:5173", "https://app.nestmap.com"]

    @property
    def is_sqlite(self):
        return self.DATABASE_URL.startswith("sqlite")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
