# backend/services/stores.py
"""Session-backed implementations of the stores the checkout engine talks to.

Every write is flushed before returning. Committing or rolling back the
session is left to the caller so that a checkout can be made all-or-nothing.
"""
import itertools
import threading
import time
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Query, Session

from models.account import Account
from models.membership import Membership
from models.order import Order, OrderItem
from models.payment import Payment
from models.product import Product
from models.promo import PromoCode
from services.errors import FatalInconsistency, InsufficientFunds

_order_seq = itertools.count(1)
_order_seq_lock = threading.Lock()


def next_order_id() -> str:
    # Millisecond timestamp plus a process-wide counter keeps ids unique
    with _order_seq_lock:
        seq = next(_order_seq)
    return f"O{int(time.time() * 1000)}-{seq}"


class AccountStore:
    def __init__(self, db: Session):
        self.db = db

    def _row(self, email: str, lock: bool = False) -> Optional[Account]:
        q = self.db.query(Account).filter(Account.email == email)
        if lock:
            q = q.with_for_update()
        return q.first()

    def get_balance(self, email: str) -> float:
        row = self._row(email)
        return row.balance if row else 0.0

    def debit(self, email: str, amount: float) -> float:
        """Debits ``amount`` and returns the new balance."""
        row = self._row(email, lock=True)
        current = row.balance if row else 0.0
        if current < amount:
            raise InsufficientFunds()
        if row is None:
            row = Account(email=email, balance=0.0)
            self.db.add(row)
        row.balance = round(current - amount, 2)
        self.db.flush()
        return row.balance

    def credit(self, email: str, amount: float) -> float:
        row = self._row(email, lock=True)
        if row is None:
            row = Account(email=email, balance=0.0)
            self.db.add(row)
        row.balance = round((row.balance or 0.0) + amount, 2)
        self.db.flush()
        return row.balance


class ProductStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: str) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def adjust_stock(self, product_id: str, delta: int) -> int:
        product = (
            self.db.query(Product)
            .filter(Product.id == product_id)
            .with_for_update()
            .first()
        )
        if product is None:
            raise FatalInconsistency(f"Product {product_id} disappeared during checkout")
        new_stock = product.stock + delta
        if new_stock < 0:
            raise FatalInconsistency(f"Insufficient inventory for {product.name}")
        product.stock = new_stock
        self.db.flush()
        return new_stock


class OrderLedger:
    def __init__(self, db: Session):
        self.db = db

    def append(self, *, email, fulfilment, location, promo_code,
               subtotal, discount, fee, total, lines) -> str:
        order = Order(
            id=next_order_id(),
            email=email,
            fulfilment=fulfilment,
            location=location,
            promo_code=promo_code or None,
            subtotal=round(subtotal, 2),
            discount=round(discount, 2),
            fee=round(fee, 2),
            total=round(total, 2),
        )
        order.items = [
            OrderItem(product_id=line.product_id, qty=line.quantity, unit_price=line.snapshot_unit_price)
            for line in lines
        ]
        self.db.add(order)
        self.db.flush()
        return order.id

    def count_prior_orders(self, email: str) -> int:
        return self.db.query(Order).filter(Order.email == email).count()

    def for_customer(self, email: str) -> Query:
        """Newest-first query over a customer's orders, left open for paging."""
        return (
            self.db.query(Order)
            .filter(Order.email == email)
            .order_by(Order.created_at.desc(), Order.id.desc())
        )

    def list_for_customer(self, email: str) -> List[Order]:
        return self.for_customer(email).all()


class PaymentLedger:
    def __init__(self, db: Session):
        self.db = db

    def append(self, order_id: str, balance_before: float, balance_after: float,
               paid_at: Optional[datetime] = None) -> Payment:
        payment = Payment(
            order_id=order_id,
            balance_before=round(balance_before, 2),
            balance_after=round(balance_after, 2),
            paid_at=paid_at or datetime.now(),
        )
        self.db.add(payment)
        self.db.flush()
        return payment


class MembershipLookup:
    def __init__(self, db: Session):
        self.db = db

    def is_active(self, email: str, today: Optional[date] = None) -> bool:
        if not email:
            return False
        row = self.db.get(Membership, email)
        return bool(row and row.is_active(today))

    def summary(self, email: str) -> str:
        row = self.db.get(Membership, email) if email else None
        return row.summary if row else "No membership"


class PromoCatalog:
    def __init__(self, db: Session):
        self.db = db

    def find(self, code: str) -> Optional[PromoCode]:
        if not code:
            return None
        return self.db.get(PromoCode, code.strip().upper())
