"""
Database path utilities for Kinship API services.
"""
from pathlib import Path

from config.settings import settings


def _ensure_parent(path: Path) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    return str(path)


def get_people_db_path() -> str:
    """
    Get the path to the people database.

    Creates the parent directory if it doesn't exist. People and
    interactions share this file.

    Returns:
        Path to the kinship.db file
    """
    return _ensure_parent(settings.people_db_path)


def get_notifications_db_path() -> str:
    """
    Get the path to the notifications database.

    Returns:
        Path to the notifications.db file
    """
    return _ensure_parent(settings.notifications_db_path)
