import pytest

from services.cart import Cart, CartService, MAX_TOTAL_UNITS, MAX_UNITS_PER_PRODUCT
from services.errors import CartFull, InsufficientStock, InvalidQuantity, LineLimitExceeded, UnknownProduct
from services.stores import ProductStore


def _invariants_hold(cart):
    lines = list(cart.items())
    assert sum(l.quantity for l in lines) <= MAX_TOTAL_UNITS
    assert all(l.quantity <= MAX_UNITS_PER_PRODUCT for l in lines)


def test_add_creates_line():
    cart = Cart()
    cart.add_or_merge("P1", 3)
    assert cart.quantities() == {"P1": 3}


def test_merge_accumulates_like_single_add():
    merged, single = Cart(), Cart()
    merged.add_or_merge("P1", 3)
    merged.add_or_merge("P1", 2)
    single.add_or_merge("P1", 5)
    assert merged.quantities() == single.quantities() == {"P1": 5}
    assert len(merged.items()) == 1


@pytest.mark.parametrize("qty", [0, -1])
def test_add_rejects_non_positive(qty):
    cart = Cart()
    with pytest.raises(InvalidQuantity):
        cart.add_or_merge("P1", qty)
    assert cart.is_empty()


def test_add_over_line_limit_leaves_cart_unchanged():
    cart = Cart()
    with pytest.raises(LineLimitExceeded):
        cart.add_or_merge("P1", 15)
    assert cart.is_empty()


def test_merge_over_line_limit():
    cart = Cart()
    cart.add_or_merge("P1", 8)
    with pytest.raises(LineLimitExceeded):
        cart.add_or_merge("P1", 3)
    assert cart.quantities() == {"P1": 8}


def test_total_units_cap():
    cart = Cart()
    cart.add_or_merge("P1", 10)
    cart.add_or_merge("P2", 10)
    with pytest.raises(CartFull):
        cart.add_or_merge("P3", 1)
    _invariants_hold(cart)


def test_total_cap_checked_before_line_cap():
    cart = Cart()
    cart.add_or_merge("P1", 10)
    cart.add_or_merge("P2", 5)
    with pytest.raises(CartFull):
        cart.add_or_merge("P3", 11)


def test_set_quantity_clamps_to_line_cap():
    cart = Cart()
    assert cart.set_quantity("P1", 25) is True
    assert cart.quantities() == {"P1": 10}


def test_set_quantity_zero_removes_and_signals_missing():
    cart = Cart()
    cart.add_or_merge("P1", 2)
    assert cart.set_quantity("P1", 0) is True
    assert cart.is_empty()
    assert cart.set_quantity("P1", 0) is False


def test_set_quantity_distinct_line_cap():
    cart = Cart()
    for i in range(20):
        cart.set_quantity(f"X{i}", 1)
    with pytest.raises(CartFull):
        cart.set_quantity("X20", 1)
    # existing lines can still be edited
    cart.set_quantity("X0", 4)
    assert cart.quantities()["X0"] == 4


def test_remove_is_idempotent():
    cart = Cart()
    cart.add_or_merge("P1", 1)
    assert cart.remove("P1") is True
    assert cart.remove("P1") is False


def test_items_ordered_by_insertion_and_restartable():
    cart = Cart()
    cart.add_or_merge("B", 1)
    cart.add_or_merge("A", 1)
    cart.add_or_merge("C", 1)
    cart.add_or_merge("B", 1)
    items = cart.items()
    assert [l.product_id for l in items] == ["B", "A", "C"]
    assert [l.product_id for l in items] == ["B", "A", "C"]


def test_clear():
    cart = Cart()
    cart.add_or_merge("P1", 1)
    cart.add_or_merge("P2", 1)
    cart.clear()
    assert cart.is_empty()
    assert list(cart.items()) == []


def test_service_creates_carts_lazily():
    service = CartService()
    assert service.get("a@example.com") is service.get("a@example.com")
    assert service.get("a@example.com") is not service.get("b@example.com")
    service.discard("a@example.com")
    assert service.get("a@example.com").is_empty()


def test_service_add_rejects_unknown_product(seeded):
    service = CartService()
    with pytest.raises(UnknownProduct):
        service.add(ProductStore(seeded), "a@example.com", "NOPE", 1)


def test_service_edit_checks_stock(seeded):
    service = CartService()
    products = ProductStore(seeded)
    with pytest.raises(InsufficientStock) as exc:
        service.edit_quantity(products, "a@example.com", "P1", 6)
    assert "5 available" in exc.value.message
    assert service.edit_quantity(products, "a@example.com", "P2", 50) is True
    assert service.get("a@example.com").quantities() == {"P2": 10}
    assert service.edit_quantity(products, "a@example.com", "P2", 0) is True
    assert service.edit_quantity(products, "a@example.com", "P2", 0) is False
