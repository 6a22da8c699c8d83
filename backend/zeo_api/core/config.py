"""
Core configuration module for the Zeo Tourism website API.
Settings are read from environment variables and an optional .env file.
"""

from pydantic_settings import BaseSettings
from pathlib import Path
import logging

logger = logging.getLogger(__name__)

# backend/ -- relative paths in settings resolve against this directory
BACKEND_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Defaults match a single-node SQLite deployment.
    """

    # Application
    app_name: str = "Zeo Tourism API"
    app_version: str = "1.0.0"
    environment: str = "production"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./travel.db"

    # API Configuration
    api_prefix: str = "/api"
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    api_workers: int = 1  # one writer process for SQLite
    max_request_body_bytes: int = 10 * 1024 * 1024

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    # CORS - frontend dev servers (extend via .env)
    cors_origins: list = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "HEAD"]
    cors_allow_headers: list = ["Content-Type", "Accept", "Authorization", "X-API-Key"]

    # Rate limiting
    rate_limit_enabled: bool = True

    # Admin API key for write endpoints (MUST be set via .env in production)
    admin_api_key: str = "CHANGE-ME-IN-DOTENV"

    # Content
    featured_limit: int = 6
    frontend_dist_dir: str = "../frontend/dist"

    # Legacy JSON fixtures used by the ingestion scripts
    data_dir: str = "./data"
    scraped_tours_path: str = "./data/scraped/guru-tours-data.json"
    scraped_tour_id_offset: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = True


def resolve_path(value: str) -> Path:
    """Resolve a settings path; relative values are anchored at backend/."""
    path = Path(value)
    if not path.is_absolute():
        path = BACKEND_DIR / path
    return path.resolve()


# Global settings instance
settings = Settings()
