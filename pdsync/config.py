"""
Centralized settings using Pydantic Settings (v2).
Reads environment variables (and .env) so the Pipedrive token is NOT hard-coded.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pdsync.errors import ConfigurationError


class Settings(BaseSettings):
    # ---- Pipedrive ----
    # PIPEDRIVE_API_KEY is the name older .env files use
    PIPEDRIVE_API_TOKEN: str = Field(
        default="",
        validation_alias=AliasChoices("PIPEDRIVE_API_TOKEN", "PIPEDRIVE_API_KEY"),
    )
    PIPEDRIVE_COMPANY_DOMAIN: str = Field(default="", description="Account subdomain, e.g. 'acme' for acme.pipedrive.com")

    # ---- Input artifacts ----
    INPUT_DATA_PATH: str = Field(default="config/input_data.json")
    MAPPINGS_PATH: str = Field(default="config/mappings.json")
    ORGANIZATION_MAPPINGS_PATH: Optional[str] = Field(
        default=None,
        description="If set, sync an organization first and link the person to it",
    )

    # ---- Logging ----
    LOG_LEVEL: str = Field(default="INFO")
    SERVICE_NAME: str = Field(default="pipedrive-sync")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


def load_settings(**overrides) -> Settings:
    """Build settings and fail fast when the Pipedrive credentials are missing."""
    settings = Settings(**overrides)
    missing = []
    if not settings.PIPEDRIVE_API_TOKEN.strip():
        missing.append("PIPEDRIVE_API_TOKEN")
    if not settings.PIPEDRIVE_COMPANY_DOMAIN.strip():
        missing.append("PIPEDRIVE_COMPANY_DOMAIN")
    if missing:
        raise ConfigurationError(f"{' and '.join(missing)} not set (check your .env)")
    return settings
