from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal

class Settings(BaseSettings):
    # CORS allowed origins (add your frontend URLs here)
    allowed_origins: List[str] = [
        "http://localhost:8081",        # Expo dev
        "http://localhost:19006",       # Expo web
        "http://localhost:3000"  # local frontend
    ]

    # Remote price history endpoint
    prices_api_url: str = "https://sampleapis.assimilate.be/bitcoin/historical_prices"
    # Bearer token for the endpoint, injected via env / .env only
    prices_api_token: str | None = None
    request_timeout: float = 30.0

    # POST retry policy: attempts and base delay (seconds) for exponential backoff
    write_max_attempts: int = 3
    write_backoff_base: float = 1.0

    # Default history window when the client does not pick one
    default_window_days: int = 30

    # Where favorites/settings live
    storage_backend: Literal["supabase", "memory"] = "memory"
    supabase_url: str | None = None
    supabase_service_key: str | None = None

    log_level: str = "INFO"
    log_file: str | None = None

    # Load .env file automatically if present
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

# Create a single settings instance
settings = Settings()
