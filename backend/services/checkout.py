# backend/services/checkout.py
"""Order placement: validate a cart, price it and commit the purchase.

A checkout either commits every effect (balance debit, stock decrement,
order and payment records, emptied cart) or none of them. Preview and
checkout share ``quote`` so a previewed total always matches the charged
total for an unchanged cart.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from services import pricing
from services.cart import Cart
from services.errors import (
    EmptyCart, FatalInconsistency, InsufficientFunds, InsufficientStock, StoreError, UnknownProduct,
)
from services.promotions import PromotionResolver, is_blank, normalize_code
from services.stores import (
    AccountStore, MembershipLookup, OrderLedger, PaymentLedger, ProductStore, PromoCatalog,
)
from utils.locks import checkout_keys, hold

logger = logging.getLogger(__name__)

SUMMARY_RULE = "-" * 64
FOOTER_RULE = "-" * 40


@dataclass
class QuoteLine:
    product_id: str
    name: str
    quantity: int
    unit_price: float

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


@dataclass
class OrderQuote:
    fulfilment: str
    promo_code: Optional[str]
    is_member: bool
    lines: List[QuoteLine] = field(default_factory=list)
    subtotal: float = 0.0
    promo_rate: float = 0.0
    student_rate: float = 0.0
    discount_rate: float = 0.0
    discount: float = 0.0
    fee: float = 0.0
    total: float = 0.0

    @property
    def is_pickup(self) -> bool:
        return self.fulfilment == pricing.PICKUP


@dataclass
class CheckoutResult:
    ok: bool
    message: str
    reason: Optional[str] = None
    order_id: Optional[str] = None
    total: Optional[float] = None
    new_balance: Optional[float] = None

    @classmethod
    def declined(cls, error: StoreError) -> "CheckoutResult":
        return cls(ok=False, message=error.message, reason=error.reason)

    @classmethod
    def placed(cls, order_id: str, total: float, new_balance: float) -> "CheckoutResult":
        return cls(ok=True, message="OK", order_id=order_id, total=total, new_balance=new_balance)


class CheckoutService:
    def __init__(self, db: Session, accounts: AccountStore, products: ProductStore,
                 orders: OrderLedger, payments: PaymentLedger,
                 memberships: MembershipLookup, promos: PromoCatalog):
        self.db = db
        self.accounts = accounts
        self.products = products
        self.orders = orders
        self.payments = payments
        self.memberships = memberships
        self.promotions = PromotionResolver(promos.find)

    @classmethod
    def for_session(cls, db: Session) -> "CheckoutService":
        return cls(
            db,
            accounts=AccountStore(db),
            products=ProductStore(db),
            orders=OrderLedger(db),
            payments=PaymentLedger(db),
            memberships=MembershipLookup(db),
            promos=PromoCatalog(db),
        )

    # ---- pricing ----

    def quote(self, email: str, cart: Optional[Cart], fulfilment: str,
              promo_code: Optional[str] = None, strict: bool = False) -> OrderQuote:
        """Prices a cart without touching any store.

        With ``strict`` unknown products and short stock raise; otherwise
        lines whose product no longer exists are skipped.
        """
        mode = pricing.normalize_mode(fulfilment)
        is_pickup = pricing.is_pickup(mode)
        is_member = self.memberships.is_active(email)
        quote = OrderQuote(fulfilment=mode, promo_code=normalize_code(promo_code) or None, is_member=is_member)

        for line in (cart.items() if cart is not None else ()):
            product = self.products.get(line.product_id)
            if product is None:
                if strict:
                    raise UnknownProduct()
                continue
            if strict and line.quantity > product.stock:
                raise InsufficientStock(product_name=product.name)
            if line.quantity <= 0:
                continue

            unit = pricing.unit_price(product, is_member)
            line.snapshot_unit_price = unit
            quote.lines.append(QuoteLine(product.id, product.name or "Unknown", line.quantity, unit))
            quote.subtotal += unit * line.quantity

        # A non-blank code always suppresses the student pickup discount,
        # even when the code itself turns out to be worthless.
        if not is_blank(promo_code):
            prior = self.orders.count_prior_orders(email)
            quote.promo_rate = self.promotions.discount_rate(email, promo_code, is_pickup, prior)
            quote.student_rate = 0.0
        else:
            quote.student_rate = pricing.student_pickup_discount_rate(email, mode)
        if quote.promo_rate > 0:
            quote.student_rate = 0.0

        quote.discount_rate = min(settings.MAX_DISCOUNT_RATE, max(0.0, quote.promo_rate + quote.student_rate))
        quote.discount = quote.subtotal * quote.discount_rate
        quote.fee = pricing.fulfilment_fee(email, mode)
        quote.total = round(max(0.0, quote.subtotal - quote.discount + quote.fee), 2)
        return quote

    # ---- commit ----

    def checkout(self, email: str, cart: Optional[Cart], fulfilment: str,
                 location: Optional[str], promo_code: Optional[str] = None) -> CheckoutResult:
        if cart is None or cart.is_empty():
            return CheckoutResult.declined(EmptyCart())

        lines = list(cart.items())
        with hold(checkout_keys(email, [line.product_id for line in lines])):
            try:
                quote = self.quote(email, cart, fulfilment, promo_code, strict=True)

                balance = self.accounts.get_balance(email)
                if balance < quote.total:
                    raise InsufficientFunds()

                try:
                    new_balance = self.accounts.debit(email, quote.total)
                except InsufficientFunds:
                    raise FatalInconsistency(f"Balance of {email} changed during checkout")

                for line in lines:
                    self.products.adjust_stock(line.product_id, -line.quantity)

                order_id = self.orders.append(
                    email=email,
                    fulfilment=quote.fulfilment,
                    location=location,
                    promo_code=quote.promo_code,
                    subtotal=quote.subtotal,
                    discount=quote.discount,
                    fee=quote.fee,
                    total=quote.total,
                    lines=lines,
                )
                self.payments.append(order_id, balance, new_balance, datetime.now())
                self.db.commit()
            except FatalInconsistency:
                self.db.rollback()
                logger.exception("Checkout for %s aborted on inconsistent state", email)
                raise
            except StoreError as e:
                self.db.rollback()
                logger.info("Checkout for %s declined: %s", email, e.reason)
                return CheckoutResult.declined(e)
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Checkout for %s failed while persisting", email)
                raise

        cart.clear()
        logger.info("Order %s placed by %s, total %.2f", order_id, email, quote.total)
        return CheckoutResult.placed(order_id, quote.total, new_balance)

    # ---- preview ----

    def build_order_summary(self, customer_name: Optional[str], email: Optional[str], cart: Optional[Cart],
                            fulfilment: str, location: Optional[str], promo_code: Optional[str] = None) -> str:
        quote = self.quote(email, cart, fulfilment, promo_code)
        return render_summary(quote, customer_name, email, location)


def _na(value) -> str:
    return value if value and str(value).strip() else "(N/A)"


def render_summary(quote: OrderQuote, customer_name, email, location) -> str:
    out = ["===== Order Summary ====="]
    out.append(f"Customer: {_na(customer_name)}")
    out.append(f"Email: {email if email is not None else '(N/A)'}")
    out.append(f"Fulfilment: {'Pickup' if quote.is_pickup else 'Delivery'}")
    label = "Pickup Location" if quote.is_pickup else "Delivery Address"
    out.append(f"{label}: {_na(location)}")
    out.append("")

    out.append("Items:")
    out.append(f"{'Name':<28} {'Qty':>6} {'Unit':>10} {'Line Total':>12}")
    out.append(SUMMARY_RULE)
    for line in quote.lines:
        name = line.name if len(line.name) <= 28 else line.name[:27] + "…"
        out.append(f"{name:<28} {line.quantity:>6d} {line.unit_price:>10.2f} {line.line_total:>12.2f}")
    out.append(SUMMARY_RULE)
    out.append(f"{'Subtotal':<28} {'':>6} {'':>10} {quote.subtotal:>12.2f}")
    out.append("")

    if quote.promo_rate > 0:
        out.append(f"Promo ({quote.promo_code}): -{quote.subtotal * quote.promo_rate:.2f}")
    if quote.student_rate > 0:
        out.append(f"Student Pickup {quote.student_rate * 100:.0f}%: -{quote.subtotal * quote.student_rate:.2f}")
    out.append(f"{'Pickup Fee' if quote.is_pickup else 'Delivery Fee'}: +{quote.fee:.2f}")

    out.append(FOOTER_RULE)
    out.append(f"Total Payable: {quote.total:.2f}")
    out.append("=" * 40)
    return "\n".join(out) + "\n"
