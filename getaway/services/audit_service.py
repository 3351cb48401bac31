import re

from sqlalchemy.exc import SQLAlchemyError

from getaway.models import PaymentAuditLog
from getaway.models.enums import AuditEvent
from getaway.services.validation import parse_amount


def mask_email(email):
    if not email or "@" not in str(email):
        return None
    local, _, domain = str(email).strip().partition("@")
    return f"{local[:2]}***@{domain}"


def mask_phone(phone):
    digits = re.sub(r"\D", "", str(phone)) if phone else ""
    if not digits:
        return None
    if len(digits) <= 4:
        return "*" * len(digits)
    return "*" * (len(digits) - 4) + digits[-4:]


def _clip(value, size):
    if not value:
        return None
    return str(value)[:size]


class AuditLogService:
    """Best-effort writer for ``payment_audit_log``; a failed write never reaches the caller."""

    def __init__(self, session, logger):
        self.session = session
        self.logger = logger

    def record(
        self,
        event_type,
        ip_address=None,
        user_agent=None,
        customer_email=None,
        customer_phone=None,
        amount=None,
        razorpay_order_id=None,
        error_message=None,
        meta=None,
    ):
        entry = PaymentAuditLog(
            event_type=event_type,
            ip_address=_clip(ip_address, 64),
            user_agent=_clip(user_agent, 255),
            customer_email=mask_email(customer_email),
            customer_phone=mask_phone(customer_phone),
            amount=parse_amount(amount),
            razorpay_order_id=razorpay_order_id,
            error_message=error_message,
            meta=meta or None,
        )
        try:
            self.session.add(entry)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            self.logger.warning("Failed to write payment audit log (%s): %s", event_type, exc)
            return None
        return entry

    def record_attempt(
        self, form, ip_address, user_agent, error_message=None, razorpay_order_id=None, event_type=None, meta=None
    ):
        form = form or {}
        return self.record(
            event_type or AuditEvent.PAYMENT_ATTEMPT,
            ip_address=ip_address,
            user_agent=user_agent,
            customer_email=form.get("customerEmail"),
            customer_phone=form.get("customerPhone"),
            amount=form.get("amount"),
            razorpay_order_id=razorpay_order_id,
            error_message=error_message,
            meta={
                "destination_id": form.get("destinationId"),
                "payment_type": form.get("paymentType"),
                **(meta or {}),
            },
        )
