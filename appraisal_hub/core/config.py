import os
import logging
from pydantic import BaseModel, Field
from typing import List
from dotenv import load_dotenv

load_dotenv()

class ScoringSettings(BaseModel):
    weight_tolerance: float = Field(default=float(os.getenv("WEIGHT_TOLERANCE", "0.01")))
    default_hr_score_weight: int = Field(default=int(os.getenv("DEFAULT_HR_SCORE_WEIGHT", "30")))
    max_rating: int = 5

class Config(BaseModel):
    app_name: str = "Appraisal Hub"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./appraisals.db")

    # Scoring & templates
    scoring: ScoringSettings = ScoringSettings()

    # Manual links
    link_default_expiry_days: int = int(os.getenv("LINK_DEFAULT_EXPIRY_DAYS", "0"))  # 0 = never expires
    link_token_bytes: int = 16

    # Enterprise Architecture
    version: str = "1.0.0"
    build_id: str = os.getenv("BUILD_ID", "local")
    request_id_header: str = "X-Request-ID"

    # CORS: comma-separated origins loaded from env
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            o.strip()
            for o in os.getenv(
                "CORS_ORIGINS",
                "http://localhost:5173,http://localhost:3000,"
                "http://127.0.0.1:5173,http://127.0.0.1:3000",
            ).split(",")
            if o.strip()
        ]
    )

    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))

    # Feature Flags
    enable_auto_assignment: bool = os.getenv("ENABLE_AUTO_ASSIGNMENT", "true").lower() == "true"
    enable_summaries: bool = os.getenv("ENABLE_SUMMARIES", "true").lower() == "true"

settings = Config()

_logger = logging.getLogger(__name__)
if settings.environment == "production" and settings.database_url.startswith("sqlite"):
    _logger.warning("⚠ Running production with SQLite; set DATABASE_URL to a server database.")
