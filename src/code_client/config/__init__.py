"""Configuration package -- typed, validated settings from YAML + .env."""

from .settings import ClientSettings, LoggingSettings

__all__ = [
    "ClientSettings",
    "LoggingSettings",
    "load_all_settings",
]


def load_all_settings() -> tuple[ClientSettings, LoggingSettings]:
    """Load and return all configuration objects.

    Returns a tuple of (ClientSettings, LoggingSettings), each populated
    from its own YAML file with environment variable overrides.
    """
    return ClientSettings(), LoggingSettings()
