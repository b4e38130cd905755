# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite:///./campus_store.db"
    LOG_LEVEL: str = "INFO"

    # Pricing rules
    STUDENT_EMAIL_DOMAIN: str = "student.monash.edu"
    STAFF_EMAIL_DOMAIN: str = "monash.edu"
    DELIVERY_FEE: float = 20.0
    STUDENT_PICKUP_RATE: float = 0.05
    MAX_DISCOUNT_RATE: float = 0.90

    # Account top-up ceiling per request
    MAX_TOPUP: float = 1000.0

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra = "ignore"

settings = Settings()
