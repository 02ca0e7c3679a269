"""
Application settings for Tasksheet.

All environment-derived values live here and are read once per process.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from the environment (and an optional .env file)."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    debug: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]

    # Spreadsheet holding the Users and Projects tables
    google_sheet_id: str = ""
    google_sheet_name_users: str = "Users"
    google_sheet_name_projects: str = "Projects"
    tasks_sheet_name: str = "Tasks"

    # Service account used for the Users/Projects store
    google_service_account_json: str = ""
    google_application_credentials: str = ""

    # OAuth client used for per-user access to task sheets
    google_client_id: str = ""
    google_client_secret: str = ""
    google_redirect_uri: str = ""
    google_token_url: str = "https://oauth2.googleapis.com/token"
    google_auth_url: str = "https://accounts.google.com/o/oauth2/v2/auth"

    # Session tokens
    session_secret: str = Field(default="change-me", min_length=1)
    session_algorithm: str = "HS256"
    session_ttl_minutes: int = 60 * 24


@lru_cache
def get_settings() -> Settings:
    return Settings()
