"""Pydantic models for data validation"""

import base64
import hashlib
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .datekey import is_valid_key


def content_hash(data: bytes) -> str:
    """SHA256 hex digest used to compare images across days"""
    return hashlib.sha256(data).hexdigest()


class NewsEntry(BaseModel):
    """A cached daily news image"""

    model_config = ConfigDict(from_attributes=True)

    date: str = Field(description="Date key, YYYY-MM-DD")
    image: str = Field(min_length=1, description="Base64 encoded image bytes")
    created_at: datetime | None = Field(default=None, description="Insert time")

    @field_validator("date")
    @classmethod
    def check_date(cls, v: str) -> str:
        if not is_valid_key(v):
            raise ValueError(f"Invalid date key: {v!r}")
        return v

    @property
    def image_bytes(self) -> bytes:
        return base64.b64decode(self.image)

    @property
    def content_hash(self) -> str:
        return content_hash(self.image_bytes)
