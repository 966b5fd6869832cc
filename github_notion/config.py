"""
Application configuration management.

Settings are resolved lazily, once per request, so a missing or malformed
variable surfaces as a classified configuration failure instead of a crash
at import time.
"""

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from github_notion.errors import ConfigurationError


PERMISSIVE_ENVIRONMENT = "development"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "INFO"


class AppSettings(BaseSettings):
    """Process-level settings; all have defaults so they load at startup."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    environment: str = "production"
    api_version: str = "0.0.0"
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        """Upper-case the level; unknown levels fall back to INFO."""
        level = str(value).strip().upper()
        return level if level in LOG_LEVELS else DEFAULT_LOG_LEVEL


class Settings(AppSettings):
    """Application settings loaded from environment variables."""

    # GitHub
    github_webhook_secret: SecretStr

    # Notion
    notion_token: SecretStr
    notion_database_id: str = Field(min_length=1)
    notion_task_id_property: str = "Task ID"
    notion_task_id_prefix: str = Field(default="GEN", min_length=1)
    notion_status_property: str = "Status"
    notion_pr_links_property: str = "PR links"
    notion_dry_run: bool = False
    notion_api_base_url: str = "https://api.notion.com/v1"
    notion_api_version: str = "2025-09-03"
    notion_timeout_seconds: float = 30.0

    @property
    def signature_required(self) -> bool:
        """Unsigned deliveries are only accepted in the development environment."""
        return self.environment != PERMISSIVE_ENVIRONMENT


def get_settings() -> Settings:
    """
    Load settings from the environment.

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If a required setting is absent or malformed
    """
    try:
        return Settings()
    except ValidationError as e:
        # Only field names are reported; values may be secrets
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
        raise ConfigurationError("Invalid config", details={"fields": fields}) from e
