"""
Pure field validators for the Pay Now form.

Every validator returns ``None`` when the value is acceptable and a
human-readable reason otherwise, so callers can run all of them and join the
failures.
"""

import re
from decimal import Decimal, InvalidOperation

from getaway.models.enums import PAYMENT_TYPES

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
PHONE_SEPARATORS = re.compile(r"[\s\-()]")

REQUIRED_FIELD = "This field is required"
INVALID_EMAIL = "Please enter a valid email address"
INVALID_PHONE = "Please enter a valid phone number"
INVALID_AMOUNT = "Please enter a valid amount"
INVALID_PAYMENT_TYPE = "Please select a valid payment type"


def validate_name(name):
    trimmed = (name or "").strip() if isinstance(name, str) else ""
    if not trimmed:
        return REQUIRED_FIELD
    if len(trimmed) < NAME_MIN_LENGTH:
        return f"Name must be at least {NAME_MIN_LENGTH} characters"
    if len(trimmed) > NAME_MAX_LENGTH:
        return f"Name must be less than {NAME_MAX_LENGTH} characters"
    return None


def validate_email(email):
    if not email or not isinstance(email, str):
        return REQUIRED_FIELD
    if not EMAIL_PATTERN.match(email.strip()):
        return INVALID_EMAIL
    return None


def normalize_phone(phone):
    return PHONE_SEPARATORS.sub("", phone or "")


def validate_phone(phone):
    if not phone or not isinstance(phone, str):
        return REQUIRED_FIELD
    if not PHONE_PATTERN.match(normalize_phone(phone)):
        return INVALID_PHONE
    return None


def parse_amount(amount):
    if amount is None or isinstance(amount, bool):
        return None
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def format_inr(amount):
    return f"₹{int(amount):,}"


def validate_amount(amount, minimum=500, maximum=500000):
    value = parse_amount(amount)
    if value is None or value <= 0:
        return INVALID_AMOUNT
    if value < Decimal(str(minimum)):
        return f"Minimum payment amount is {format_inr(minimum)}"
    if value > Decimal(str(maximum)):
        return f"Maximum payment amount is {format_inr(maximum)}"
    return None


def validate_payment_type(payment_type):
    if payment_type not in PAYMENT_TYPES:
        return INVALID_PAYMENT_TYPE
    return None


def collect_errors(form, minimum, maximum):
    """Run every field validator and return ``{field: reason}`` for the failures."""
    checks = {
        "customerName": validate_name(form.get("customerName")),
        "customerEmail": validate_email(form.get("customerEmail")),
        "customerPhone": validate_phone(form.get("customerPhone")),
        "amount": validate_amount(form.get("amount"), minimum, maximum),
        "paymentType": validate_payment_type(form.get("paymentType")),
    }
    return {field: reason for field, reason in checks.items() if reason}
