import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the project root directory (parent of personalization folder)
PROJECT_ROOT = Path(__file__).parent.parent

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables"""

    # Where per-user blobs live: "json" (local files), "database" or "memory"
    store_backend: str = "json"

    # Local JSON storage
    data_dir: str = str(PROJECT_ROOT / ".personalization")

    # Database storage
    database_url: str = f"sqlite:///{PROJECT_ROOT / 'personalization.db'}"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="PERSONALIZATION_",
        env_file=str(PROJECT_ROOT / ".env"),
        extra="ignore",
    )


settings = Settings()


def configure_logging(level: str = None):
    """Configure root logging for the CLI"""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
