from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # API Settings
    PROJECT_NAME: str = "FinTrack API"
    API_V1_STR: str = "/api/v1"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Expense sharing, settlements and investment tracking API"

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "fintrack"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # JWT
    SECRET_KEY: str = "change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Alpha Vantage (free tier allows 5 requests per minute)
    ALPHA_VANTAGE_API_KEY: str = ""
    ALPHA_VANTAGE_URL: str = "https://www.alphavantage.co/query"
    QUOTE_REQUEST_DELAY_SECONDS: float = 12.0
    QUOTE_TIMEOUT_SECONDS: float = 15.0

    # Resend email delivery
    RESEND_API_KEY: str = ""
    RESEND_API_URL: str = "https://api.resend.com/emails"
    NOTIFICATION_SENDER: str = "FinanceTracker <onboarding@resend.dev>"
    NOTIFICATION_TIMEOUT_SECONDS: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Balances below this are treated as settled
    BALANCE_EPSILON: float = 1e-6

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
