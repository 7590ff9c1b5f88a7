from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Catalogue source: built-in table unless a JSON file is given
    catalogue_path: Optional[str] = None

    # Display
    display_decimals: int = 3

    # Logging
    log_level: str = "INFO"

    # Rate limiting (per-IP)
    rate_limit: str = "100/minute"
    rate_limit_enabled: bool = True

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://0.0.0.0:3000",
        "http://localhost",
        "http://127.0.0.1",
    ]


settings = Settings()
