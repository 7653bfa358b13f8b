"""
Application Configuration
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Desviciar API"
    DEBUG: bool = False
    ALLOWED_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from string"""
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Firebase (Auth + Firestore + FCM)
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_CREDENTIALS_PATH: str = "firebase-admin-sdk.json"
    # Raw service account JSON, takes precedence over the credentials file
    FIREBASE_SERVICE_ACCOUNT: str = ""

    # Stripe
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""

    # Progress
    DEFAULT_TOTAL_HABITS: int = 6
    APP_TIMEZONE: str = "America/Sao_Paulo"
    DEFAULT_DAILY_ADDICTION_MINUTES: int = 45
    TRIGGER_LOG_RATE_LIMIT: str = "30/minute"

    # Inactivity notifications
    INACTIVITY_CHECK_HOUR: int = 12
    INACTIVITY_THRESHOLD_HOURS: int = 24
    NOTIFICATION_COOLDOWN_HOURS: int = 20
    INACTIVITY_BATCH_LIMIT: int = 500
    DASHBOARD_URL: str = "https://dsvc.app/#/dashboard"
    NOTIFICATION_ICON_URL: str = "https://i.imgur.com/nyLkCgz.png"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8001

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
