# app/services/cart_store.py
import logging
from typing import Callable, Protocol

from app.core.errors import AuthRequiredError, CartValidationError
from app.schemas.cart import (
    CartItemRead,
    CartLineItem,
    CartSummary,
    ProductSnapshot,
)

logger = logging.getLogger(__name__)


class CartStorage(Protocol):
    def load(self, key: str) -> list[CartLineItem]: ...

    def save(self, key: str, items: list[CartLineItem]) -> None: ...


class CartStore:
    """
    Line items of one cart session plus the totals derived from them.

    The store owns its items: callers only get copies, and every change
    goes through add_to_cart / remove_from_cart / update_quantity /
    clear_cart. Items are loaded from storage when the store is created
    and written back after each mutation. A mutation builds the new list,
    saves it, and only then swaps it in, so a failed save changes nothing.

    Totals (subtotal, item_count, ...) are never stored; they are computed
    from the items on every read.
    """

    def __init__(
        self,
        storage: CartStorage,
        key: str,
        is_authenticated: Callable[[], bool] = lambda: False,
    ):
        self._storage = storage
        self._key = key
        self._is_authenticated = is_authenticated
        self._items: list[CartLineItem] = list(storage.load(key))

    # ---- derived reads ----

    @property
    def key(self) -> str:
        return self._key

    @property
    def items(self) -> list[CartLineItem]:
        return [item.model_copy(deep=True) for item in self._items]

    @property
    def subtotal(self) -> float:
        return sum(item.line_total for item in self._items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def line_count(self) -> int:
        return len(self._items)

    @property
    def savings(self) -> float:
        return sum(
            (item.product.price - item.product.effective_price) * item.quantity
            for item in self._items
        )

    def summary(self) -> CartSummary:
        return CartSummary(
            items=[
                CartItemRead(
                    product=item.product.model_copy(),
                    quantity=item.quantity,
                    line_total=item.line_total,
                    discount_percent=item.product.discount_percent,
                )
                for item in self._items
            ],
            subtotal=self.subtotal,
            item_count=self.item_count,
            line_count=self.line_count,
            savings=self.savings,
        )

    # ---- mutations ----

    def add_to_cart(self, product: ProductSnapshot, quantity: int = 1) -> None:
        """
        Add `quantity` units of `product`.

        An existing line for the same product id is incremented (and its
        snapshot refreshed) instead of adding a second line. The stored
        quantity never exceeds the product's stock ceiling.
        """
        self.check_can_add()
        _check_whole_number(quantity)
        if quantity <= 0:
            raise CartValidationError("Quantity must be at least 1")
        if product.stock == 0:
            raise CartValidationError(f"{product.name} is out of stock")

        ceiling = product.stock_ceiling
        new_items: list[CartLineItem] = []
        found = False
        for item in self._items:
            if item.product.id == product.id:
                found = True
                new_qty = _clamp(item.quantity + quantity, ceiling)
                new_items.append(CartLineItem(product=product, quantity=new_qty))
            else:
                new_items.append(item)

        if not found:
            new_items.append(
                CartLineItem(product=product, quantity=_clamp(quantity, ceiling))
            )

        self._commit(new_items)
        logger.info(f"Added {quantity} x {product.id} to cart {self._key}")

    def check_can_add(self) -> None:
        """Raise AuthRequiredError unless the caller is logged in."""
        if not self._is_authenticated():
            raise AuthRequiredError()

    def remove_from_cart(self, product_id: str) -> None:
        """Remove the line for `product_id`; nothing happens if absent."""
        if not self._has(product_id):
            return
        self._commit([it for it in self._items if it.product.id != product_id])
        logger.info(f"Removed {product_id} from cart {self._key}")

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """
        Replace the quantity of an existing line.

        quantity <= 0 removes the line. An unknown product id is ignored.
        """
        _check_whole_number(quantity)
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return
        if not self._has(product_id):
            return

        new_items = [
            CartLineItem(
                product=it.product,
                quantity=_clamp(quantity, it.product.stock_ceiling),
            )
            if it.product.id == product_id
            else it
            for it in self._items
        ]
        self._commit(new_items)
        logger.info(f"Set {product_id} quantity to {quantity} in cart {self._key}")

    def clear_cart(self) -> None:
        self._commit([])
        logger.info(f"Cleared cart {self._key}")

    # ---- internal helpers ----

    def _has(self, product_id: str) -> bool:
        return any(it.product.id == product_id for it in self._items)

    def _commit(self, items: list[CartLineItem]) -> None:
        self._storage.save(self._key, items)
        self._items = items


def _check_whole_number(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise CartValidationError("Quantity must be a whole number")


def _clamp(quantity: int, ceiling: int) -> int:
    return max(1, min(quantity, ceiling))
