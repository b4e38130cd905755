from models.users import User
from models.account import Account
from models.membership import Membership
from models.product import Product
from models.promo import PromoCode
from models.store import Store
from models.order import Order, OrderItem
from models.payment import Payment
from models.log import Log

__all__ = [
    "User", "Account", "Membership", "Product", "PromoCode",
    "Store", "Order", "OrderItem", "Payment", "Log",
]
