# app/schemas/cart.py
import uuid

from sqlmodel import SQLModel, Field

# Ceiling used when a snapshot does not know the product's stock.
FALLBACK_STOCK_CEILING = 999


class ProductSnapshot(SQLModel):
    """
    Copy of the product fields the cart needs, taken when the product
    is added. Later catalog changes do not flow into existing lines.
    """

    id: str
    name: str
    price: float = Field(ge=0)
    discount_price: float | None = Field(default=None, ge=0)
    image: str | None = None
    stock: int | None = Field(default=None, ge=0)
    type: str | None = None
    collection: str | None = None

    @property
    def effective_price(self) -> float:
        if self.discount_price is not None:
            return self.discount_price
        return self.price

    @property
    def stock_ceiling(self) -> int:
        if self.stock is None:
            return FALLBACK_STOCK_CEILING
        return self.stock

    @property
    def discount_percent(self) -> int:
        if self.discount_price is None or self.price <= 0:
            return 0
        return round((self.price - self.discount_price) / self.price * 100)


class CartLineItem(SQLModel):
    """
    One product + quantity pair in a cart.
    """

    product: ProductSnapshot
    quantity: int = Field(ge=1)

    @property
    def line_total(self) -> float:
        return self.product.effective_price * self.quantity


# ---- API payloads ----


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    product_id: uuid.UUID
    quantity: int = 1


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item. 0 or less removes it.
    """

    quantity: int


class CartItemRead(SQLModel):
    """
    Read model for a single cart line, including line_total.
    """

    product: ProductSnapshot
    quantity: int
    line_total: float
    discount_percent: int


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    subtotal: float
    item_count: int
    line_count: int
    savings: float
