# backend/services/cart.py
"""Session-scoped shopping carts.

Carts live in memory only: they are created on first access for a customer,
emptied after a successful checkout and discarded on logout.
"""
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from services.errors import (
    CartFull, InsufficientStock, InvalidQuantity, LineLimitExceeded, UnknownProduct,
)

# Maximum total quantity across all lines of a cart
MAX_TOTAL_UNITS = 20
# Maximum quantity of a single product line
MAX_UNITS_PER_PRODUCT = 10
# Maximum number of distinct lines when editing quantities
MAX_DISTINCT_LINES = 20


@dataclass
class CartLine:
    product_id: str
    quantity: int
    added_at: int = field(default_factory=time.monotonic_ns)
    # Receipt-only unit price filled in at preview/checkout time
    snapshot_unit_price: Optional[float] = None


class CartItems:
    """Restartable view over cart lines ordered by insertion time."""

    def __init__(self, lines: List[CartLine]):
        self._lines = lines

    def __iter__(self) -> Iterator[CartLine]:
        return iter(sorted(self._lines, key=lambda line: line.added_at))

    def __len__(self) -> int:
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)


class Cart:
    """Line items of one customer.

    Two ceilings exist: ``add_or_merge`` caps the total units at 20 while
    ``set_quantity`` caps the number of distinct lines at 20.
    """

    def __init__(self, owner: str = ""):
        self.owner = owner
        self._lines: List[CartLine] = []

    def _find(self, product_id: str) -> Optional[CartLine]:
        return next((line for line in self._lines if line.product_id == product_id), None)

    @property
    def total_units(self) -> int:
        return sum(line.quantity for line in self._lines)

    def is_empty(self) -> bool:
        return not self._lines

    def add_or_merge(self, product_id: str, qty: int) -> CartLine:
        if qty <= 0:
            raise InvalidQuantity()

        if self.total_units + qty > MAX_TOTAL_UNITS:
            raise CartFull()

        line = self._find(product_id)
        if line is not None:
            if line.quantity + qty > MAX_UNITS_PER_PRODUCT:
                raise LineLimitExceeded()
            line.quantity += qty
            return line

        if qty > MAX_UNITS_PER_PRODUCT:
            raise LineLimitExceeded()
        line = CartLine(product_id=product_id, quantity=qty)
        self._lines.append(line)
        return line

    def set_quantity(self, product_id: str, new_qty: int) -> bool:
        """Sets an absolute quantity. Returns False when removing an absent line."""
        if new_qty <= 0:
            return self.remove(product_id)

        new_qty = min(new_qty, MAX_UNITS_PER_PRODUCT)

        line = self._find(product_id)
        if line is None:
            if len(self._lines) >= MAX_DISTINCT_LINES:
                raise CartFull("Cart item limit reached (max 20 items)")
            self._lines.append(CartLine(product_id=product_id, quantity=new_qty))
        else:
            line.quantity = new_qty
        return True

    def remove(self, product_id: str) -> bool:
        before = len(self._lines)
        self._lines = [line for line in self._lines if line.product_id != product_id]
        return len(self._lines) != before

    def clear(self) -> None:
        self._lines.clear()

    def items(self) -> CartItems:
        return CartItems(self._lines)

    def quantities(self) -> Dict[str, int]:
        return {line.product_id: line.quantity for line in self.items()}


class CartService:
    """Registry of session carts keyed by customer email."""

    def __init__(self):
        self._carts: Dict[str, Cart] = {}
        self._lock = threading.Lock()

    def get(self, email: str) -> Cart:
        with self._lock:
            cart = self._carts.get(email)
            if cart is None:
                cart = self._carts[email] = Cart(owner=email)
            return cart

    def discard(self, email: str) -> None:
        with self._lock:
            self._carts.pop(email, None)

    def add(self, products, email: str, product_id: str, qty: int) -> CartLine:
        if products.get(product_id) is None:
            raise UnknownProduct("Product not found")
        return self.get(email).add_or_merge(product_id, qty)

    def edit_quantity(self, products, email: str, product_id: str, new_qty: int) -> bool:
        cart = self.get(email)
        product = products.get(product_id)
        if product is None:
            raise UnknownProduct("Product not found")

        if new_qty <= 0:
            return cart.remove(product_id)

        new_qty = min(new_qty, MAX_UNITS_PER_PRODUCT)
        if new_qty > product.stock:
            raise InsufficientStock(available=product.stock)
        return cart.set_quantity(product_id, new_qty)

    def remove(self, email: str, product_id: str) -> bool:
        return self.get(email).remove(product_id)

    def clear(self, email: str) -> None:
        self.get(email).clear()


cart_service = CartService()
