import os
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables from the project .env explicitly (works regardless of cwd)
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env")

class Settings(BaseSettings):
    """Application settings"""

    # Base directory
    BASE_DIR: Path = Path(__file__).parent.parent

    # Database (fallback to local SQLite if not provided)
    DATABASE_URL: str = os.getenv("DATABASE_URL") or "sqlite:///./click_payments.db"

    # Click merchant credentials
    CLICK_SECRET_KEY: str = os.getenv("CLICK_SECRET_KEY", "")
    CLICK_SERVICE_ID: str = os.getenv("CLICK_SERVICE_ID", "")

    # Server
    PORT: int = int(os.getenv("PORT", "8000"))

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }

# Create global settings instance
settings = Settings()
