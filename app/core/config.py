"""Application configuration loaded from environment variables."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    APP_NAME: str = "EntreeFox API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./entreefox.db"

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # JWT
    JWT_SECRET_KEY: str = "change-me-entreefox-dev-secret"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    COUNTER_RECONCILE_INTERVAL_SECONDS: int = 3600

    # Feed ranking
    FEED_DEFAULT_MODE: str = "algorithm"
    FEED_DEFAULT_LIMIT: int = 20
    FEED_DECAY_HOURS: float = 24.0
    FEED_LIKE_WEIGHT: float = 1.0
    FEED_COMMENT_WEIGHT: float = 2.0
    FEED_REPOST_WEIGHT: float = 1.5
    FEED_FRESH_WINDOW_HOURS: float = 2.0
    FEED_FRESH_BOOST: float = 3.0
    FEED_HIGH_TIER_THRESHOLD: float = 5.0
    FEED_LOW_TIER_THRESHOLD: float = 1.0
    FEED_PROMOTION_PROBABILITY: float = 0.10
    FEED_PROMOTION_WINDOW: int = 5

    # Notifications
    NOTIFICATIONS_PER_SOURCE: int = 50
    NOTIFICATIONS_LIMIT: int = 50


settings = Settings()
