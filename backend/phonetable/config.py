"""
Configuration Management
Centralized settings loaded from environment variables
"""

import os
from functools import lru_cache
from pydantic import BaseModel
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings(BaseModel):
    """Application settings loaded from environment variables"""

    # Application
    app_name: str = os.getenv("APP_NAME", "Phone Table Extractor API")
    version: str = os.getenv("VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    environment: str = os.getenv("ENVIRONMENT", "production")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "phonetable.log")

    # CORS
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # Input limits
    max_text_length: int = int(os.getenv("MAX_TEXT_LENGTH", "2000000"))

    # Rate Limiting
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    extract_rate_limit: str = os.getenv("EXTRACT_RATE_LIMIT", "30/minute")
    general_rate_limit: str = os.getenv("GENERAL_RATE_LIMIT", "100/minute")

    # Engine tunables
    structure_sample_size: int = int(os.getenv("STRUCTURE_SAMPLE_SIZE", "20"))
    header_threshold: float = float(os.getenv("HEADER_THRESHOLD", "0.5"))
    low_confidence_threshold: float = float(os.getenv("LOW_CONFIDENCE_THRESHOLD", "0.3"))
    min_expected_records: int = int(os.getenv("MIN_EXPECTED_RECORDS", "5"))
    default_region: str = os.getenv("DEFAULT_REGION", "SG")

    class Config:
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
