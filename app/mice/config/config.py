import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """
    Settings read straight from environment variables.
    """
    # Database
    DATABASE_URL: str = os.environ.get("DATABASE_URL")
    DB_POOL_MIN_SIZE: int = int(os.environ.get("DB_POOL_MIN_SIZE", 2))
    DB_POOL_MAX_SIZE: int = int(os.environ.get("DB_POOL_MAX_SIZE", 10))

    # Rate limiter storage: "memory://" or a redis:// URL
    RATE_LIMITER_STORAGE_URL: str = os.environ.get("RATE_LIMITER_STORAGE_URL", "memory://")

    # Tokens are issued by the hosted auth provider, we only verify them.
    SECRET_KEY: str = os.environ.get("SECRET_KEY")
    ALGORITHM: str = os.environ.get("ALGORITHM", "HS256")
    TOKEN_AUDIENCE: str = os.environ.get("TOKEN_AUDIENCE")

    # External email service. Notifications are skipped when unset.
    EMAIL_SERVICE_URL: str = os.environ.get("EMAIL_SERVICE_URL")
    EMAIL_SERVICE_TIMEOUT_SECONDS: float = float(os.environ.get("EMAIL_SERVICE_TIMEOUT_SECONDS", 10))

    LOG_DIR: str = os.environ.get("LOG_DIR", "logs")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
    CORS_ORIGINS: list = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]

# Single importable instance
settings = Config()
