from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Development builds warn when a form's page tree changes after first use
    ENVIRONMENT: Literal["development", "production"] = "development"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["text", "json"] = "text"

    # Where a session starts when the caller passes no starting_page
    DEFAULT_STARTING_PAGE: Literal["first_incomplete", "first_page"] = "first_incomplete"

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

# Singleton instance
settings = Settings()
