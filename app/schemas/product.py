# app/schemas/product.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str | None = None
    price: float
    discount_price: float | None = None
    image: str | None = None
    stock: int
    type: str | None = None
    collection_id: uuid.UUID | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None


class ProductCreate(SQLModel):
    """
    Payload for listing a new product.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    description: str | None = None
    price: float = Field(ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    image: str | None = None
    stock: int = Field(default=0, ge=0)
    type: str | None = Field(default=None, max_length=100)
    collection_id: uuid.UUID | None = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    image: str | None = None
    stock: int | None = Field(default=None, ge=0)
    type: str | None = Field(default=None, max_length=100)
    collection_id: uuid.UUID | None = None
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CollectionRead(SQLModel):
    id: uuid.UUID
    name: str
    slug: str | None = None
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None


class CollectionCreate(SQLModel):
    """
    Payload for creating a collection.

    - slug is optional: if omitted, generated from `name`.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    slug: str | None = None
    description: str | None = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty if provided")
        return v


class CollectionUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    slug: str | None = None
    description: str | None = None
    is_active: bool | None = None

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty")
        return v
