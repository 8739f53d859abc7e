# core/config.py

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Panchayath Admin API"
    ENV: str = "development"

    # -------------------------------------------------
    # Console Domains (CORS)
    # -------------------------------------------------
    CONSOLE_DOMAINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:8080",
    ]

    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary store)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None)
    SUPABASE_ANON_KEY: Optional[str] = Field(None)
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None)

    # -------------------------------------------------
    # Notifications (toast relay)
    # -------------------------------------------------
    NOTIFY_WEBHOOK_URL: Optional[str] = Field(None)

    # -------------------------------------------------
    # Access control
    # -------------------------------------------------
    # Resolved capability sets are cached per principal for this long.
    CAPABILITY_CACHE_TTL_SECONDS: int = Field(
        300,
        description="TTL for cached capability sets (default: 5 minutes)",
    )

    # Granted to plain members and guests. Empty means dashboard only.
    MEMBER_DEFAULT_CAPABILITIES: List[str] = Field(default_factory=list)

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    model_config = {"case_sensitive": True}


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list after loading settings
# -------------------------------------------------
settings.BACKEND_CORS_ORIGINS = sorted(
    {d.rstrip("/") for d in settings.CONSOLE_DOMAINS}
)
