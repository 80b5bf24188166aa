"""
Tests for CartStore
"""

import pytest
from unittest.mock import Mock

from app.core.errors import AuthRequiredError, CartValidationError
from app.schemas.cart import FALLBACK_STOCK_CEILING, CartLineItem, ProductSnapshot
from app.services.cart_store import CartStore

SESSION_KEY = "a" * 32


def expected_subtotal(store: CartStore) -> float:
    return sum(
        item.product.effective_price * item.quantity for item in store.items
    )


@pytest.fixture
def store(cart_storage):
    return CartStore(cart_storage, SESSION_KEY, is_authenticated=lambda: True)


class TestProductSnapshot:
    """Tests for price helpers on the snapshot."""

    def test_effective_price_uses_discount(self, phone):
        assert phone.effective_price == 30000.0

    def test_effective_price_falls_back_to_price(self, charger):
        assert charger.effective_price == 1500.0

    def test_zero_discount_price_is_still_a_discount(self):
        freebie = ProductSnapshot(id="p", name="Sticker", price=50.0, discount_price=0.0)
        assert freebie.effective_price == 0.0

    def test_stock_ceiling_fallback(self, charger, phone):
        assert charger.stock_ceiling == FALLBACK_STOCK_CEILING
        assert phone.stock_ceiling == 10

    def test_discount_percent(self, phone, charger):
        assert phone.discount_percent == 25
        assert charger.discount_percent == 0


class TestAddToCart:

    def test_add_new_item(self, store, phone):
        store.add_to_cart(phone, 2)

        assert len(store.items) == 1
        assert store.items[0].quantity == 2
        assert store.subtotal == 60000.0
        assert store.item_count == 2

    def test_same_product_merges_into_one_line(self, store, phone):
        store.add_to_cart(phone, 2)
        store.add_to_cart(phone, 3)

        assert store.line_count == 1
        assert store.items[0].quantity == 5

    def test_quantity_clamped_to_stock(self, store):
        scarce = ProductSnapshot(id="p-scarce", name="Galaxy S10", price=9000.0, stock=3)
        store.add_to_cart(scarce, 10)

        assert store.items[0].quantity == 3

    def test_increment_clamped_to_stock(self, store, phone):
        store.add_to_cart(phone, 8)
        store.add_to_cart(phone, 8)

        assert store.items[0].quantity == 10

    def test_unknown_stock_uses_fallback_ceiling(self, store, charger):
        store.add_to_cart(charger, 5000)

        assert store.items[0].quantity == FALLBACK_STOCK_CEILING

    def test_default_quantity_is_one(self, store, charger):
        store.add_to_cart(charger)

        assert store.items[0].quantity == 1

    def test_increment_refreshes_snapshot(self, store, phone):
        store.add_to_cart(phone, 1)
        repriced = phone.model_copy(update={"discount_price": 28000.0})
        store.add_to_cart(repriced, 1)

        assert store.items[0].product.discount_price == 28000.0
        assert store.subtotal == 56000.0

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_rejected(self, store, phone, quantity):
        with pytest.raises(CartValidationError):
            store.add_to_cart(phone, quantity)
        assert store.items == []

    def test_non_integer_quantity_rejected(self, store, phone):
        with pytest.raises(CartValidationError):
            store.add_to_cart(phone, 1.5)

    def test_out_of_stock_rejected(self, store):
        sold_out = ProductSnapshot(id="p-out", name="Pixel 6", price=18000.0, stock=0)
        with pytest.raises(CartValidationError):
            store.add_to_cart(sold_out, 1)
        assert store.items == []

    def test_guest_cannot_add(self, cart_storage, phone):
        guest_store = CartStore(cart_storage, SESSION_KEY)

        with pytest.raises(AuthRequiredError) as exc:
            guest_store.add_to_cart(phone, 1)

        assert exc.value.message == "Please login to add items to cart"
        assert guest_store.items == []
        assert cart_storage.load(SESSION_KEY) == []

    def test_insertion_order_preserved(self, store, phone, charger):
        store.add_to_cart(charger, 1)
        store.add_to_cart(phone, 1)
        store.add_to_cart(charger, 1)

        assert [it.product.id for it in store.items] == ["prod-charger", "prod-phone"]


class TestRemoveAndUpdate:

    def test_remove_item(self, store, phone, charger):
        store.add_to_cart(phone, 1)
        store.add_to_cart(charger, 1)

        store.remove_from_cart("prod-phone")

        assert [it.product.id for it in store.items] == ["prod-charger"]
        assert store.subtotal == 1500.0

    def test_remove_missing_is_noop(self, store, phone):
        store.add_to_cart(phone, 1)
        store.remove_from_cart("does-not-exist")

        assert store.line_count == 1

    def test_update_quantity(self, store, phone):
        store.add_to_cart(phone, 1)
        store.update_quantity("prod-phone", 4)

        assert store.items[0].quantity == 4
        assert store.subtotal == 120000.0

    def test_update_to_zero_removes(self, store, phone):
        store.add_to_cart(phone, 3)
        store.update_quantity("prod-phone", 0)

        assert store.items == []
        assert store.subtotal == 0

    def test_update_negative_removes(self, store, phone):
        store.add_to_cart(phone, 3)
        store.update_quantity("prod-phone", -2)

        assert store.items == []

    def test_update_clamped_to_stock(self, store, phone):
        store.add_to_cart(phone, 1)
        store.update_quantity("prod-phone", 50)

        assert store.items[0].quantity == 10

    def test_update_missing_is_noop(self, store, phone):
        store.add_to_cart(phone, 2)
        store.update_quantity("does-not-exist", 7)

        assert store.line_count == 1
        assert store.items[0].quantity == 2

    def test_update_does_not_require_auth(self, cart_storage, phone):
        CartStore(cart_storage, SESSION_KEY, is_authenticated=lambda: True).add_to_cart(phone, 1)
        guest_store = CartStore(cart_storage, SESSION_KEY)

        guest_store.update_quantity("prod-phone", 3)

        assert guest_store.items[0].quantity == 3

    def test_clear_cart(self, store, phone, charger):
        store.add_to_cart(phone, 1)
        store.add_to_cart(charger, 2)

        store.clear_cart()

        assert store.items == []
        assert store.item_count == 0
        assert store.subtotal == 0


class TestDerivedTotals:

    def test_subtotal_holds_after_every_mutation(self, store, phone, charger):
        scarce = ProductSnapshot(id="p-scarce", name="Galaxy S10", price=9000.0, stock=3)
        steps = [
            lambda: store.add_to_cart(phone, 2),
            lambda: store.add_to_cart(charger, 4),
            lambda: store.add_to_cart(scarce, 10),
            lambda: store.update_quantity("prod-phone", 7),
            lambda: store.add_to_cart(phone, 9),
            lambda: store.remove_from_cart("prod-charger"),
            lambda: store.update_quantity("p-scarce", 0),
            lambda: store.update_quantity("missing", 3),
            lambda: store.add_to_cart(charger, 1),
        ]
        for step in steps:
            step()
            assert store.subtotal == expected_subtotal(store)
            assert all(item.quantity >= 1 for item in store.items)
            ids = [item.product.id for item in store.items]
            assert len(ids) == len(set(ids))

    def test_counts_and_savings(self, store, phone, charger):
        store.add_to_cart(phone, 2)
        store.add_to_cart(charger, 3)

        assert store.item_count == 5
        assert store.line_count == 2
        assert store.savings == 20000.0  # (40000 - 30000) * 2

    def test_summary(self, store, phone):
        store.add_to_cart(phone, 2)
        summary = store.summary()

        assert summary.subtotal == 60000.0
        assert summary.items[0].line_total == 60000.0
        assert summary.items[0].discount_percent == 25
        assert summary.item_count == 2

    def test_items_are_copies(self, store, phone):
        store.add_to_cart(phone, 2)

        store.items[0].quantity = 99

        assert store.items[0].quantity == 2
        assert store.subtotal == 60000.0


class TestPersistence:

    def test_reload_restores_items(self, cart_storage, phone, charger):
        first = CartStore(cart_storage, SESSION_KEY, is_authenticated=lambda: True)
        first.add_to_cart(phone, 2)
        first.add_to_cart(charger, 1)

        reloaded = CartStore(cart_storage, SESSION_KEY)

        assert [it.product.id for it in reloaded.items] == ["prod-phone", "prod-charger"]
        assert reloaded.subtotal == first.subtotal

    def test_saves_on_every_mutation(self, phone):
        storage = Mock()
        storage.load.return_value = []
        store = CartStore(storage, SESSION_KEY, is_authenticated=lambda: True)

        store.add_to_cart(phone, 1)
        store.update_quantity("prod-phone", 2)
        store.remove_from_cart("prod-phone")
        store.clear_cart()

        assert storage.save.call_count == 4

    def test_noop_mutations_do_not_save(self, phone):
        storage = Mock()
        storage.load.return_value = []
        store = CartStore(storage, SESSION_KEY, is_authenticated=lambda: True)

        store.remove_from_cart("missing")
        store.update_quantity("missing", 3)

        storage.save.assert_not_called()

    def test_failed_save_leaves_state_untouched(self, phone):
        storage = Mock()
        storage.load.return_value = [CartLineItem(product=phone, quantity=1)]
        storage.save.side_effect = OSError("disk full")
        store = CartStore(storage, SESSION_KEY, is_authenticated=lambda: True)

        with pytest.raises(OSError):
            store.add_to_cart(phone, 3)

        assert store.items[0].quantity == 1
        assert store.subtotal == 30000.0
