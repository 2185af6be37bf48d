from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Any, List, Optional
import json

INSECURE_JWT_SECRET = "your-secret-key-change-in-production"


def parse_origins(v: Any) -> List[str]:
    """Parse CORS origins from a JSON list or a comma-separated string."""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Application
    APP_NAME: str = "Donation Hub"
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database
    DATABASE_URL: str = "sqlite:///./donations.db"
    SQL_ECHO: bool = False

    # JWT
    JWT_SECRET: str = INSECURE_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # Passwords
    BCRYPT_ROUNDS: int = 10
    MIN_PASSWORD_LENGTH: int = 6

    # Default admin seeded on first start
    DEFAULT_ADMIN_USERNAME: str = "admin"
    DEFAULT_ADMIN_EMAIL: str = "admin@donations.org"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    # HTTP
    ALLOWED_ORIGINS: Any = ["*"]
    RATE_LIMIT_ENABLED: bool = True
    API_RATE_LIMIT: str = "1000 per 15 minutes"
    AUTH_RATE_LIMIT: str = "20 per minute"
    FRONTEND_DIR: Optional[str] = None

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def validate_origins(cls, v):
        return parse_origins(v)

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def uses_insecure_secret(self) -> bool:
        return self.JWT_SECRET == INSECURE_JWT_SECRET


settings = Settings()
