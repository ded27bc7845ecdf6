"""
Database Models for URL Shortener Service

This module defines the SQLModel database schemas for:
- ShortLink: Maps a short code to its target URL, expiry and click counter
- Visit: Append-only ledger of individual redirects

Design Decisions:
- The short code itself is the primary key, so uniqueness is enforced by the database
- clicks is denormalized on ShortLink for stats without scanning the ledger
- Visit.code is indexed but not a foreign key; the ledger is independent history
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlmodel import Field, SQLModel

from shortlinks.core.clock import utc_now


class ShortLink(SQLModel, table=True):
    """
    Main table storing short code mappings.

    Fields:
    - code: Normalized short code (primary key)
    - long_url: The target URL, stored verbatim
    - created_at: Set once at insertion
    - expiry_at: created_at + validity window; never updated
    - last_accessed_at: Time of the latest successful redirect
    - clicks: Number of successful redirects
    """
    __tablename__ = "short_links"

    code: str = Field(
        sa_column=Column(String(32), primary_key=True),
        max_length=32
    )
    long_url: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    expiry_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    last_accessed_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    clicks: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))


class Visit(SQLModel, table=True):
    """
    Visit ledger table for detailed analytics.

    One row per redirect served. Rows are never updated or deleted.
    """
    __tablename__ = "visits"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(
        sa_column=Column(String(32), nullable=False, index=True)
    )
    visited_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    ip: Optional[str] = Field(
        default=None,
        sa_column=Column(String(45), nullable=True)  # IPv6 max length
    )
    user_agent: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True)
    )
    referrer: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True)
    )
