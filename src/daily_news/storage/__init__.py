"""Storage module for the daily news image cache."""

from .database import DatabaseManager, close_database, get_db_manager, init_database
from .models import Base, NewsEntryDB
from .repositories import NewsCacheRepository

__all__ = [
    "DatabaseManager",
    "get_db_manager",
    "init_database",
    "close_database",
    "Base",
    "NewsEntryDB",
    "NewsCacheRepository",
]
