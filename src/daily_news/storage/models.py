"""SQLAlchemy models for database persistence."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class NewsEntryDB(Base):
    """Database model for cached daily news images.

    One row per date. Rows are written once and never updated.
    """

    __tablename__ = "news"

    date = Column(String(10), primary_key=True)  # YYYY-MM-DD
    image = Column(Text, nullable=False)  # base64
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(UTC))
