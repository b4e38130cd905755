from datetime import date, timedelta

import pytest

from models.promo import PromoCode
from services.promotions import PromotionResolver

TODAY = date(2026, 3, 1)

CATALOG = {
    "PROMO10": PromoCode(code="PROMO10", percent=10, scope="ALL", expiry=None),
    "FIRST_PICKUP": PromoCode(code="FIRST_PICKUP", percent=15, scope="PICKUP", expiry=None),
    "NEWMONASH20": PromoCode(code="NEWMONASH20", percent=20, scope="PICKUP", expiry=None),
    "OLD": PromoCode(code="OLD", percent=30, scope="ALL", expiry=TODAY - timedelta(days=1)),
    "LASTDAY": PromoCode(code="LASTDAY", percent=30, scope="ALL", expiry=TODAY),
    "ALLFREE": PromoCode(code="ALLFREE", percent=100, scope="ALL", expiry=None),
}


@pytest.fixture
def resolver():
    return PromotionResolver(CATALOG.get, today=lambda: TODAY)


@pytest.mark.parametrize("code", [None, "", "   "])
def test_blank_code(resolver, code):
    assert resolver.discount_rate("c", code, True, 0) == 0.0


def test_unknown_code(resolver):
    assert resolver.discount_rate("c", "NOPE", True, 0) == 0.0


def test_code_is_case_insensitive(resolver):
    assert resolver.discount_rate("c", "promo10", False, 3) == pytest.approx(0.10)
    assert resolver.discount_rate("c", " Promo10 ", False, 3) == pytest.approx(0.10)


def test_expiry_is_strictly_before_today(resolver):
    assert resolver.discount_rate("c", "OLD", True, 0) == 0.0
    assert resolver.discount_rate("c", "LASTDAY", True, 0) == pytest.approx(0.30)


@pytest.mark.parametrize("code, rate", [("FIRST_PICKUP", 0.15), ("NEWMONASH20", 0.20)])
def test_first_pickup_codes(resolver, code, rate):
    assert resolver.discount_rate("c", code, True, 0) == pytest.approx(rate)
    assert resolver.discount_rate("c", code, False, 0) == 0.0
    assert resolver.discount_rate("c", code, True, 1) == 0.0


def test_rate_is_clamped(resolver):
    assert resolver.discount_rate("c", "ALLFREE", True, 0) == pytest.approx(0.90)
