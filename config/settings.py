"""
Kinship Configuration Settings
"""
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Paths (use KINSHIP_ prefix)
    data_path: Path = Field(
        default=Path("./data"),
        alias="KINSHIP_DATA_PATH",
        description="Directory holding the SQLite databases"
    )

    # Server (port 8000 is canonical)
    port: int = Field(default=8000, alias="KINSHIP_PORT")
    host: str = Field(default="0.0.0.0", alias="KINSHIP_HOST")

    log_level: str = Field(
        default="INFO",
        alias="KINSHIP_LOG_LEVEL",
        description="Root log level (DEBUG, INFO, WARNING, ERROR)"
    )

    # People defaults
    default_closeness: int = Field(
        default=3,
        ge=1,
        le=5,
        alias="KINSHIP_DEFAULT_CLOSENESS",
        description="Closeness assigned to new connections when none is given"
    )

    # Notifications
    notify_on_suggestions: bool = Field(
        default=True,
        alias="KINSHIP_NOTIFY_ON_SUGGESTIONS",
        description="Create an activity notification when high-confidence suggestions appear"
    )
    default_reminder_frequency_days: int = Field(
        default=7,
        alias="KINSHIP_REMINDER_FREQUENCY_DAYS",
        description="Days without contact before a contact reminder is created"
    )

    @property
    def people_db_path(self) -> Path:
        """Path to the people/interactions database."""
        return self.data_path / "kinship.db"

    @property
    def notifications_db_path(self) -> Path:
        """Path to the notifications database."""
        return self.data_path / "notifications.db"


settings = Settings()
