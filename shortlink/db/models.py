"""
Database Models for the Link Shortener Service

This module defines the SQLModel schema for Link, the mapping between a
short code and the original URL plus its visit counter.

Design Decisions:
- Unique index on short_code: the database, not the application, decides
  which of two racing inserts wins
- Index on created_at for the newest-first listing
- click_count is only ever changed by an atomic UPDATE in the link store
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Integer, String, Text
from sqlmodel import Column, Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Link(SQLModel, table=True):
    """
    Main table storing short code mappings.

    Fields:
    - id: Auto-incrementing primary key assigned by the database
    - original_url: The long URL that was shortened
    - short_code: Unique code (6-8 characters, base62 alphabet)
    - click_count: Number of successful resolutions
    - created_at: Timestamp when the link was created
    - last_clicked_at: Timestamp of the latest resolution, None until the first
    """
    __tablename__ = "links"
    __table_args__ = (
        CheckConstraint("click_count >= 0", name="ck_links_click_count_non_negative"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    original_url: str = Field(sa_column=Column(Text, nullable=False))
    short_code: str = Field(
        sa_column=Column(String(8), nullable=False, unique=True, index=True),
        max_length=8
    )
    click_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0, server_default="0")
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    last_clicked_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
