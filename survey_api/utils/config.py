# survey_api/utils/config.py
import os
from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from survey_api.models.enums import QuestionCategory, QuestionLevel

# Load .env file before defining settings
load_dotenv()

class Settings(BaseSettings):
    # --- Storage ---
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./survey.db")

    # --- Logging ---
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # --- Access ---
    # Admin login is a plain compare against this value
    admin_password: str = os.getenv("ADMIN_PASSWORD", "admin123")
    # When set, admin routes require a matching x-api-key header
    api_key: str | None = os.getenv("API_KEY")

    # --- Survey content ---
    known_categories: List[str] = [c.value for c in (QuestionCategory.GRAMMAR, QuestionCategory.VOCABULARY, QuestionCategory.CULTURE)]
    known_levels: List[str] = [level.value for level in QuestionLevel]

    # --- Analytics ---
    leaderboard_size: int = 5
    recent_answers_limit: int = 5

    # --- Listing ---
    questions_page_size: int = 20

    # --- Client ---
    api_base_url: str = os.getenv("SURVEY_API_BASE_URL", "http://127.0.0.1:8000")
    api_timeout_s: float = 10.0

settings = Settings()
