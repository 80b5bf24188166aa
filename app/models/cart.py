# app/models/cart.py
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class CartSession(SQLModel, table=True):
    """
    Saved cart of one shopper session.

    Keyed by the opaque cart session cookie; there is no link to a user.
    `items` holds the serialized line items (product snapshot + quantity).
    """

    __tablename__ = "cart_sessions"

    key: str = Field(
        primary_key=True,
        max_length=32,
        description="Cart session key (32 hex chars)",
    )

    items: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    saved_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="Last write (UTC); drives expiry",
    )
