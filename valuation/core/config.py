"""
Valuation Service Configuration
Loads settings from .env file using Pydantic v2 with BaseSettings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # ==================== Project Info ====================
    PROJECT_NAME: str = "Listing Valuation API"
    PROJECT_DESCRIPTION: str = "Fair price, liquidity and street/complex resolution for aggregated listings"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # ==================== Database ====================
    DATABASE_URL: str = "sqlite:///valuation_local.db"

    # ==================== CORS ====================
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    # ==================== Server ====================
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # ==================== Valuation Cache ====================
    VALUATION_CACHE_TTL_HOURS: int = 24

    # ==================== Analogs ====================
    MIN_ANALOGS: int = 5
    MAX_ANALOGS: int = 50

    # ==================== Complex Batch Matching ====================
    COMPLEX_MATCH_PAGE_SIZE: int = 5000
    COMPLEX_MATCH_MIN_SCORE: float = 0.5
    COMPLEX_MATCH_PROGRESS_EVERY: int = 25000

    # ==================== Features ====================
    DEBUG: bool = False

    # ==================== Logging ====================
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow",
    )


# Create settings singleton
settings = Settings()
