from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic BaseSettings to load configuration with validation and defaults where appropriate.
    Facet values (statuses, resolutions, ...) are kept as the comma-separated strings the
    report configuration has always used; they are split when the query is built.
    """

    # App
    APP_NAME: str = Field(default="JIRA Report Backend", description="Application display name")
    APP_ENV: str = Field(default="development", description="Application environment")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    ALLOW_ORIGINS: List[str] = Field(default=["*"], description="CORS allowed origins list")

    # Auth for the API surface
    API_KEY_HEADER_NAME: str = Field(default="X-API-Key", description="Header name used to pass API key")
    API_KEYS: List[str] = Field(default=[], description="List of allowed API keys")

    # JIRA
    JIRA_SYSTEM: Optional[str] = Field(default="JIRA", description="Issue management system name")
    JIRA_BROWSE_URL: Optional[str] = Field(
        default=None, description="Browse URL of the project, e.g. https://your-domain.atlassian.net/browse/PROJ"
    )
    JIRA_USER: Optional[str] = Field(default=None, description="JIRA user for basic auth")
    JIRA_PASSWORD: Optional[str] = Field(default=None, description="JIRA password or API token for basic auth")
    JIRA_MAX_ENTRIES: int = Field(default=100, description="Maximum number of issues fetched (no paging)")
    JIRA_LOCALE: str = Field(default="en", description="Locale tag sent as Accept-Language")

    # HTTP
    JIRA_CONNECTION_TIMEOUT_SECONDS: float = Field(default=36.0, description="Connect timeout in seconds")
    JIRA_RESPONSE_TIMEOUT_SECONDS: float = Field(default=32.0, description="Read timeout in seconds")

    # Proxy
    PROXY_HOST: Optional[str] = Field(default=None, description="HTTP proxy host")
    PROXY_PORT: int = Field(default=8080, description="HTTP proxy port")
    PROXY_USER: Optional[str] = Field(default=None, description="Proxy user")
    PROXY_PASSWORD: Optional[str] = Field(default=None, description="Proxy password")
    PROXY_NON_PROXY_HOSTS: Optional[str] = Field(
        default=None, description="Hosts reached directly, '|' separated, '*' wildcards allowed"
    )

    # Query facets
    JIRA_STATUSES: Optional[str] = Field(default="Resolved,Done", description="Comma-separated statuses")
    JIRA_RESOLUTIONS: Optional[str] = Field(default="Done", description="Comma-separated resolutions")
    JIRA_PRIORITIES: Optional[str] = Field(default=None, description="Comma-separated priorities")
    JIRA_COMPONENT_IDS: Optional[str] = Field(default=None, description="Comma-separated component ids")
    JIRA_FIX_VERSION_IDS: Optional[str] = Field(default=None, description="Comma-separated fix version ids")
    JIRA_TYPES: Optional[str] = Field(default=None, description="Comma-separated issue types")
    JIRA_FILTER: Optional[str] = Field(default=None, description="Raw JQL replacing all other facets")
    JIRA_SORT_COLUMN_NAMES: Optional[str] = Field(
        default="Priority DESC, Created DESC", description="Sort columns, e.g. 'Fix Version DESC, Type'"
    )
    JIRA_VERSION_PREFIX: Optional[str] = Field(default=None, description="Prefix of version names in JIRA")
    PROJECT_VERSION: Optional[str] = Field(default=None, description="Version the report is produced for")
    JIRA_ONLY_CURRENT_VERSION: bool = Field(default=False, description="Keep only issues fixed in PROJECT_VERSION")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    @model_validator(mode="after")
    def _validate_limits(self) -> "Settings":
        if self.JIRA_MAX_ENTRIES < 1:
            raise ValueError("JIRA_MAX_ENTRIES must be at least 1")
        if self.JIRA_CONNECTION_TIMEOUT_SECONDS < 0 or self.JIRA_RESPONSE_TIMEOUT_SECONDS < 0:
            raise ValueError("JIRA timeouts must not be negative")
        if not 0 < self.PROXY_PORT < 65536:
            raise ValueError("PROXY_PORT must be a valid TCP port")
        return self


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings instance."""
    return Settings()
