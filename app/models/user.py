# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent user profile for the storefront.

    Identity:
      - id: MUST match the identity provider's user id (UUID from JWT "sub")

    Role:
      - "user" | "admin"
      - "guest" is represented by the absence of a token.

    Passwords live with the identity provider; this table only mirrors
    identity, name, and application role.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches the JWT 'sub' claim",
    )

    email: str = Field(
        unique=True,
        index=True,
    )

    name: str = Field(
        max_length=50,
        description="Customer display name; first part of email by default",
    )

    role: str = Field(
        default="user",
        index=True,
        description="Application role: user | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
