# Kinship API Utilities
"""
Shared utility functions for Kinship API services.
"""

from api.utils.datetime_utils import make_aware, whole_days_between
from api.utils.db_paths import get_people_db_path, get_notifications_db_path

__all__ = ["make_aware", "whole_days_between", "get_people_db_path", "get_notifications_db_path"]
