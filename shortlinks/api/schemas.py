"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
JSON field names are camelCase; Python attributes stay snake_case.

Design Principles:
- Request models accept loosely typed values; the service layer decides validity
  so that errors come back with the service's error kinds
- Response models define the output structure
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(BaseModel):
    """Request model for URL shortening endpoint."""
    url: Optional[Any] = Field(default=None, description="The long URL to shorten")
    validity: Optional[Any] = Field(
        default=None,
        description="Validity window in minutes (positive integer, default from settings)"
    )
    shortcode: Optional[str] = Field(default=None, description="Optional custom short code")


class ShortenResponse(BaseModel):
    """Response model for URL shortening endpoint."""
    logID: str
    shortLink: str = Field(..., description="The complete short URL")
    expiry: datetime = Field(..., description="When the short link stops redirecting")


class ClickDetail(CamelModel):
    timestamp: datetime
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None


class StatsResponse(CamelModel):
    """Response model for statistics endpoint."""
    log_id: str = Field(..., alias="logID")
    code: str
    long_url: str
    created_at: datetime
    expiry_at: datetime
    total_clicks: int
    unique_visitors: int
    detailed_clicks: list[ClickDetail]


class ErrorResponse(BaseModel):
    """Body of every error response."""
    logID: Optional[str] = None
    kind: str
    error: str
