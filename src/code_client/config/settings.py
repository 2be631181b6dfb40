"""Pydantic settings models for the code client.

Two settings classes load from separate YAML config files with environment
variable override support. Source priority (highest to lowest):

    1. Explicit keyword arguments
    2. Environment variables (with prefix, e.g., CODE_CLIENT_BASE_URL)
    3. .env file (for secrets, e.g., CODE_CLIENT_SESSION_TOKEN)
    4. YAML config file (e.g., config/client.yaml)
    5. Default values defined here

Config paths are resolved relative to PROJECT_ROOT so the client works
regardless of the current working directory.
"""

from pathlib import Path

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from code_client.connection import ConnectionOptions
from code_client.constants import MAX_RETRY_ATTEMPTS, MUTATION_RETRY_ATTEMPTS, REQUEST_RETRY_DELAY

# Resolve project root: settings.py -> config/ -> code_client/ -> src/ -> repo root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

_CONFIG_DIR = PROJECT_ROOT / "config"
_ENV_FILE = PROJECT_ROOT / ".env"


class _YamlSettings(BaseSettings):
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


class ClientSettings(_YamlSettings):
    """Service endpoints, client identity, request pacing and polling.

    ``session_token`` is a secret: it comes from .env or the environment
    only and must NEVER appear in YAML files or logs.
    """

    base_url: str = "https://deeproxy.khulnasoft.com"
    auth_host: str = "https://khulnasoft.com"
    source: str = "code-client"
    session_token: str = ""
    org: str | None = None
    request_id: str | None = None

    # Transport
    request_timeout_seconds: float = 60.0
    max_retry_attempts: int = MAX_RETRY_ATTEMPTS
    mutation_retry_attempts: int = MUTATION_RETRY_ATTEMPTS
    retry_delay_seconds: float = REQUEST_RETRY_DELAY

    # Caller-side polling
    poll_interval_seconds: float = 0.5
    poll_timeout_seconds: float = 600.0

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "client.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="CODE_CLIENT_",
        extra="ignore",
    )

    def connection_options(self) -> ConnectionOptions:
        """Build the shared connection context from these settings."""
        return ConnectionOptions(
            base_url=self.base_url,
            session_token=self.session_token,
            source=self.source,
            request_id=self.request_id,
            org=self.org,
        )


class LoggingSettings(_YamlSettings):
    """Log file location and rotation."""

    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10MB
    log_backup_count: int = 5

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "logging.yaml"),
        env_prefix="CODE_CLIENT_LOG_",
    )
