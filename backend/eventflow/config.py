"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./eventflow.db"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:3001"
    LOG_LEVEL: str = "INFO"

    # Auth
    JWT_SECRET: str = "devsecret"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 60 * 24 * 7
    JWT_COOKIE_NAME: str = "jwt"
    GOOGLE_CLIENT_ID: str = ""

    # Push notifications (Firebase Cloud Messaging)
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_CLIENT_EMAIL: str = ""
    FIREBASE_PRIVATE_KEY: str = ""

    # Background jobs
    ARCHIVER_ENABLED: bool = True
    ARCHIVER_TIMEZONE: str = "America/Sao_Paulo"
    NOTIFICATION_RETENTION_DAYS: int = 30

    # Moderation
    REPORT_AUTO_HIDE_THRESHOLD: int = 3

    class Config:
        env_file = ".env"


settings = Settings()
