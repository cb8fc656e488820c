import os
from typing import List
from pydantic import BaseModel
from functools import lru_cache
from dotenv import load_dotenv
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    APP_NAME: str = os.getenv("APP_NAME", "Applicant Tracker")
    ENV: str = os.getenv("ENV", "development")
    API_PREFIX: str = os.getenv("API_PREFIX", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    SQLITE_PATH: str = os.getenv("SQLITE_PATH", "app.sqlite3")
    AI_EVALUATION_ENABLED: bool = _flag("AI_EVALUATION_ENABLED", "true")
    GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY") or None
    GEMINI_MODEL: str | None = os.getenv("GEMINI_MODEL") or None
    GEMINI_FALLBACK_MODELS: str = os.getenv(
        "GEMINI_FALLBACK_MODELS", "gemini-1.5-pro-latest,gemini-1.5-flash-latest")
    GEMINI_API_BASE: str = os.getenv(
        "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
    LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))
    LLM_MAX_ATTEMPTS: int = int(os.getenv("LLM_MAX_ATTEMPTS", "2"))
    PDF_FETCH_TIMEOUT_SECONDS: float = float(
        os.getenv("PDF_FETCH_TIMEOUT_SECONDS", "15"))


def candidate_models(s: Settings) -> List[str]:
    if s.GEMINI_MODEL:
        return [s.GEMINI_MODEL]
    return [m.strip() for m in s.GEMINI_FALLBACK_MODELS.split(",") if m.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
