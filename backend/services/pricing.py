# backend/services/pricing.py
"""Pricing rules: member unit price, fulfilment fee and the student pickup rate.

All functions are side-effect free.
"""
from config import settings

PICKUP = "PICKUP"
DELIVERY = "DELIVERY"


def normalize_mode(mode):
    return (mode or "").strip().upper()


def is_pickup(mode) -> bool:
    return normalize_mode(mode) == PICKUP


def email_domain(email) -> str:
    if not email or "@" not in email:
        return ""
    return email.rsplit("@", 1)[1].strip().lower()


def is_student(email) -> bool:
    return email_domain(email) == settings.STUDENT_EMAIL_DOMAIN.lower()


def is_campus_member(email) -> bool:
    # Students and staff share the pickup discount
    return email_domain(email) in {
        settings.STUDENT_EMAIL_DOMAIN.lower(),
        settings.STAFF_EMAIL_DOMAIN.lower(),
    }


def unit_price(product, is_member: bool) -> float:
    return product.member_price if is_member else product.price


def fulfilment_fee(email, mode) -> float:
    """Pickup is free; delivery costs a flat fee waived for students."""
    if normalize_mode(mode) != DELIVERY:
        return 0.0
    if is_student(email):
        return 0.0
    return settings.DELIVERY_FEE


def student_pickup_discount_rate(email, mode) -> float:
    if is_campus_member(email) and is_pickup(mode):
        return settings.STUDENT_PICKUP_RATE
    return 0.0
