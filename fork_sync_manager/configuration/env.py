"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from fork_sync_manager.utils.constants import DEFAULT_CONFIG_FILE_PATH, DEFAULT_SYNC_BRANCH_PREFIX


class Settings(BaseSettings):
    """Environment variable settings for the application.

    GitHub credentials are read by the CLI options themselves, which also
    accept environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # Sync behaviour
    CONFIG_FILE_PATH: str = DEFAULT_CONFIG_FILE_PATH
    SYNC_BRANCH_PREFIX: str = DEFAULT_SYNC_BRANCH_PREFIX


def get_settings() -> Settings:
    """Read settings from the environment and the optional .env file."""
    return Settings()
