"""
Configuration settings for the application
"""

import os
from typing import Dict, List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wedding_planner.db")
    USE_FIREBASE: bool = os.getenv("USE_FIREBASE", "false").lower() in ("1", "true", "yes")
    FIREBASE_CREDENTIALS_JSON: str | None = os.getenv("FIREBASE_CREDENTIALS_JSON")
    FIREBASE_CREDENTIALS_FILE: str | None = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_CREDENTIALS_B64: str | None = os.getenv("FIREBASE_CREDENTIALS_B64")

    # Security: bearer token -> user id
    AUTH_TOKENS: Dict[str, str] = {}
    DEV_SUPER_USER_ID: str = "dev-super-user-id"

    # Dev mode
    DEV_MODE_STATE_FILE: str = os.getenv("DEV_MODE_STATE_FILE", "./.dev_mode.json")
    DEV_MODE_STORAGE_KEY: str = "wedding_planner_dev_mode"
    SLOW_NETWORK_MIN_MS: int = 500
    SLOW_NETWORK_MAX_MS: int = 3000

    # Test data generation
    DEFAULT_GUEST_COUNT: int = 10
    DEFAULT_TABLE_COUNT: int = 3
    DEFAULT_RELATIONSHIP_COUNT: int = 5
    DEFAULT_BATCH_SIZE: int = 25
    MAX_GUEST_COUNT: int = 100
    MAX_TABLE_COUNT: int = 20
    MAX_RELATIONSHIP_COUNT: int = 50
    RELATIONSHIP_CHUNK_SIZE: int = 50
    TABLE_GRID_SPACING: int = 150

    # Guest list
    GUESTS_PER_PAGE: int = 10
    EMAIL_LOG_BATCH_SIZE: int = 50

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"

settings = Settings()
