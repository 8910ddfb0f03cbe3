from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal
from functools import lru_cache


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Transaction Replay Engine"
    app_version: str = "1.0.0"

    # Logging settings
    log_level: str = "WARNING"
    log_format: Literal["json", "text"] = "text"

    # Input settings
    csv_delimiter: str = ","
    encoding: str = "utf-8"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REPLAY_",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
