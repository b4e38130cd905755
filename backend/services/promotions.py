# backend/services/promotions.py
from datetime import date
from typing import Callable, Optional

from config import settings

# Codes valid only on a customer's first order and only for pickup
FIRST_PICKUP_CODES = frozenset({"FIRST_PICKUP", "NEWMONASH20"})


def normalize_code(code) -> str:
    return (code or "").strip().upper()


def is_blank(code) -> bool:
    return not normalize_code(code)


class PromotionResolver:
    """Resolves a promo code into a discount rate in [0, MAX_DISCOUNT_RATE].

    ``find`` looks up a promo definition by its upper-case code and returns
    ``None`` for unknown codes.
    """

    def __init__(self, find: Callable[[str], Optional[object]], today: Callable[[], date] = date.today):
        self._find = find
        self._today = today

    def discount_rate(self, customer_id, code, is_pickup: bool, prior_order_count: int) -> float:
        key = normalize_code(code)
        if not key:
            return 0.0

        promo = self._find(key)
        if promo is None or promo.is_expired(self._today()):
            return 0.0

        if key in FIRST_PICKUP_CODES and (not is_pickup or prior_order_count != 0):
            return 0.0

        percent = max(0, min(90, promo.percent))
        return min(settings.MAX_DISCOUNT_RATE, percent / 100.0)
