# gc_app/config/settings.py

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_AUTH_SECRET = "dev-only-auth-secret-change-before-deploying"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "gc-app"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"

    # --- Auth ---
    auth_secret: str = Field(DEV_AUTH_SECRET, min_length=32)
    auth_url: str = "http://localhost:8000"
    session_max_age: int = 8 * 60 * 60

    # --- Microsoft Entra ID ---
    azure_ad_client_id: Optional[str] = None
    azure_ad_client_secret: Optional[str] = None
    azure_ad_tenant_id: Optional[str] = None

    # --- GCKey (stub provider) ---
    gckey_enabled: bool = False
    gckey_issuer: Optional[str] = None
    gckey_client_id: Optional[str] = None
    gckey_client_secret: Optional[str] = None

    # --- Database (optional; audit falls back to console without it) ---
    database_url: Optional[str] = None
    database_echo: bool = False

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"

    @model_validator(mode="after")
    def require_auth_secret_in_production(self) -> "AppSettings":
        # Session cookies are HS256; a known secret lets anyone mint an admin session
        if self.is_production and self.auth_secret == DEV_AUTH_SECRET:
            raise ValueError("AUTH_SECRET must be set when ENVIRONMENT=prod")
        return self


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
