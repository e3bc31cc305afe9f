# backend/travelling_trip/core/config_loader.py

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DB_PATH = Path(__file__).resolve().parents[2] / "data.sqlite3"
DEFAULT_LOG_DIR = Path(__file__).resolve().parents[2] / "logs"


class Settings(BaseSettings):
    # LLM (Gemini through its OpenAI-compatible endpoint)
    GEMINI_API_KEY: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    llm_temperature: float = 0.7

    # Payments
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""
    STRIPE_PRICE_ID: str = ""
    subscription_duration_days: int = 365

    # Auth tokens are issued by the hosted auth provider (HS256, sub = user id)
    JWT_SECRET_KEY: str = "supersecret"
    access_token_expire_minutes: int = 1440

    db_path: str = str(DEFAULT_DB_PATH)

    # External lookups
    nominatim_url: str = "https://nominatim.openstreetmap.org"
    wikimedia_url: str = "https://commons.wikimedia.org/w/api.php"
    http_user_agent: str = "TravellingTrip/1.0 (https://www.travellingtrip.com/)"
    lookup_timeout_seconds: int = 15

    # Hotel page proxy
    page_fetch_timeout_seconds: int = 30
    page_fetch_max_redirects: int = 10

    share_source_url: str = "https://www.travellingtrip.com/"
    environment: str = "development"

    log_dir: str = str(DEFAULT_LOG_DIR)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
