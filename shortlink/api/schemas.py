"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.

Design Principles:
- Request models accept what the browser client sends (camelCase shortCode)
- Emptiness and code format are checked by the allocation service, so a bad
  request gets the same 400 message whether it came over HTTP or not
- LinkResponse mirrors the Link table for the wire
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateLinkRequest(BaseModel):
    """Request model for the link creation endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = Field(default=None, description="The long URL to shorten")
    short_code: Optional[str] = Field(
        default=None,
        alias="shortCode",
        description="Optional custom code, 6-8 characters of [A-Za-z0-9]"
    )


class LinkResponse(BaseModel):
    """Response model for a single link."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    original_url: str
    short_code: str
    click_count: int
    created_at: datetime
    last_clicked_at: Optional[datetime] = None


class HealthResponse(BaseModel):
    """Response model for the health check."""
    ok: bool
    version: str
