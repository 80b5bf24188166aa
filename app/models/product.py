# app/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Collection(SQLModel, table=True):
    """
    Storefront category (e.g. "Laptops", "Smart Phones").

    Only active collections appear in navigation and in the sitemap.
    `slug` is optional; when missing the storefront derives it from `name`.
    """

    __tablename__ = "collections"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=100,
        index=True,
        description="Display name of the collection",
    )

    slug: str | None = Field(
        default=None,
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique when set)",
    )

    description: str | None = None

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this collection is visible on the storefront",
    )

    created_at: datetime = Field(default_factory=utcnow)

    updated_at: datetime | None = Field(
        default_factory=utcnow,
        description="Last modification timestamp (UTC)",
    )


class Product(SQLModel, table=True):
    """
    Refurbished device listed on the storefront.

    `discount_price`, when set, is what the shopper pays instead of `price`.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        min_length=2,
        index=True,
        description="Display name of the device",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description / HTML",
    )

    price: float = Field(
        ge=0,
        description="List price (INR)",
    )

    discount_price: float | None = Field(
        default=None,
        ge=0,
        description="Sale price (INR), overrides `price` when set",
    )

    image: str | None = Field(
        default=None,
        description="Main image URL",
    )

    stock: int = Field(
        default=0,
        ge=0,
        index=True,
        description="How many units currently in stock",
    )

    type: str | None = Field(
        default=None,
        max_length=100,
        description="Brand / device type name",
    )

    collection_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="collections.id",
        index=True,
    )

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime | None = Field(
        default_factory=utcnow,
        description="Last modification timestamp (UTC)",
    )
