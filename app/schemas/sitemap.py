# app/schemas/sitemap.py
from datetime import date
from enum import Enum

from sqlmodel import SQLModel, Field


class ChangeFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


class SitemapEntry(SQLModel):
    """
    One <url> element of the sitemap feed.
    """

    url: str
    last_modified: date
    change_frequency: ChangeFrequency
    priority: float = Field(ge=0.0, le=1.0)
