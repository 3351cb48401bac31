import random
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from getaway.errors import BookingConflict, InvalidInput, NotFound, OutOfRange, PersistenceError, UpstreamError
from getaway.models import Booking, Payment
from getaway.models.enums import AuditEvent, BookingStatus, PaymentStatus
from getaway.services.destination_service import DestinationService
from getaway.services.validation import collect_errors, format_inr, parse_amount

REQUIRED_FIELDS = (
    "customerName",
    "customerEmail",
    "customerPhone",
    "destinationId",
    "amount",
    "paymentType",
)
MAX_REFERENCE_ATTEMPTS = 5
ORDER_SOURCE = "pay_now_modal"


def reference_prefix(payment_env):
    return "LIVE" if (payment_env or "").lower() == "production" else "TEST"


def generate_booking_reference(prefix, today=None, rng=None):
    today = today or datetime.now(timezone.utc).date()
    rng = rng or random
    return f"{prefix}{today.strftime('%Y%m%d')}{rng.randrange(10000):04d}"


def to_minor_units(amount):
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def db_error_details(exc):
    """Non-sensitive diagnostics for a data-store failure: the driver's error code and hint, when present."""
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    details = {
        "code": getattr(orig, "pgcode", None) or getattr(exc, "code", None),
        "hint": getattr(diag, "message_hint", None),
    }
    return {key: value for key, value in details.items() if value}


class OrderService:
    def __init__(self, session, gateway, config, audit, logger, rng=None):
        self.session = session
        self.gateway = gateway
        self.audit = audit
        self.logger = logger
        self.rng = rng
        self.currency = config.get("PAYMENT_CURRENCY", "INR")
        self.min_amount = config.get("PAYMENT_MIN_AMOUNT", 500)
        self.max_amount = config.get("PAYMENT_MAX_AMOUNT", 500000)
        self.live_min_amount = config.get("PAYMENT_LIVE_MIN_AMOUNT", 100)
        self.payment_env = (config.get("PAYMENT_ENV") or "development").lower()

    def create_order(self, form, client_ip=None, user_agent=None):
        if not isinstance(form, dict):
            self.audit.record_attempt({}, client_ip, user_agent, "Invalid request body")
            raise InvalidInput("Invalid request body")

        def fail(message, event_type=None, order_id=None, meta=None):
            self.audit.record_attempt(
                form, client_ip, user_agent, message, razorpay_order_id=order_id, event_type=event_type, meta=meta
            )

        missing = [field for field in REQUIRED_FIELDS if form.get(field) in (None, "")]
        if missing:
            fail("Missing required fields")
            raise InvalidInput("Missing required fields", details={"missing": missing})

        errors = collect_errors(form, self.min_amount, self.max_amount)
        if errors:
            reason = ", ".join(errors.values())
            amount_only = set(errors) == {"amount"}
            self.logger.warning("Pay Now validation failed: %s", reason)
            fail(
                f"Validation failed: {reason}",
                event_type=AuditEvent.AMOUNT_VALIDATION_FAILED if amount_only else None,
            )
            error_cls = OutOfRange if amount_only else InvalidInput
            raise error_cls(f"Invalid form data: {reason}", details=errors)

        amount = parse_amount(form["amount"]).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        if self.payment_env != "development" and amount < Decimal(str(self.live_min_amount)):
            reason = f"Minimum payment amount is {format_inr(self.live_min_amount)}"
            fail(f"Validation failed: {reason}", event_type=AuditEvent.AMOUNT_VALIDATION_FAILED)
            raise OutOfRange(f"Invalid form data: {reason}", details={"amount": reason})

        destination_id = form["destinationId"]
        destination = DestinationService(self.session).get_active(destination_id)
        if not destination:
            self.logger.warning("Pay Now destination not found: %s", destination_id)
            fail(f"Invalid destination ID: {destination_id}")
            raise NotFound(
                "Invalid destination selected",
                status_code=400,
                details=f"Destination ID {destination_id} not found",
            )

        booking_reference = self._unique_booking_reference()
        customer_name = form["customerName"].strip()
        customer_email = form["customerEmail"].strip()
        customer_phone = form["customerPhone"].strip()
        payment_type = form["paymentType"]
        notes = form.get("notes")
        notes = notes.strip() if isinstance(notes, str) else ""

        try:
            order = self.gateway.create_order(
                amount_minor=to_minor_units(amount),
                currency=self.currency,
                receipt=booking_reference,
                notes={
                    "customer_name": customer_name,
                    "customer_email": customer_email,
                    "destination": destination.name,
                    "payment_type": payment_type,
                },
            )
        except UpstreamError as exc:
            self.logger.error("Razorpay order creation failed for %s: %s (%s)", booking_reference, exc.message, exc.details)
            fail(exc.message, event_type=AuditEvent.PAYMENT_FAILURE)
            raise
        except Exception as exc:
            self.logger.exception("Razorpay order creation failed for %s", booking_reference)
            fail("Failed to create payment order", event_type=AuditEvent.PAYMENT_FAILURE)
            raise UpstreamError("Failed to create payment order") from exc

        order_id = order["id"]
        booking = Booking(
            booking_reference=booking_reference,
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone,
            destination_id=destination.id,
            total_amount=amount,
            currency=self.currency,
            payment_type=payment_type,
            booking_status=BookingStatus.PENDING,
            is_quick_payment=True,
            source=ORDER_SOURCE,
            quick_payment_notes=notes or None,
        )
        try:
            self.session.add(booking)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            self.logger.error("Booking insert failed for %s (order %s): %s", booking_reference, order_id, exc)
            fail(
                "Failed to create booking record",
                event_type=AuditEvent.PAYMENT_FAILURE,
                order_id=order_id,
                meta=db_error_details(exc),
            )
            if isinstance(exc, IntegrityError) and self._reference_taken(booking_reference):
                raise BookingConflict(
                    "Booking reference already in use, please retry",
                    details=db_error_details(exc),
                ) from exc
            raise PersistenceError("Failed to create booking record", details=db_error_details(exc)) from exc

        payment = Payment(
            booking_id=booking.id,
            razorpay_order_id=order_id,
            amount=amount,
            currency=self.currency,
            customer_email=customer_email,
            customer_phone=customer_phone,
            payment_status=PaymentStatus.CREATED,
        )
        try:
            self.session.add(payment)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            self.logger.error("Payment insert failed for booking %s (order %s): %s", booking.id, order_id, exc)
            fail(
                "Failed to create payment record",
                event_type=AuditEvent.PAYMENT_FAILURE,
                order_id=order_id,
                meta=db_error_details(exc),
            )
            raise PersistenceError("Failed to create payment record", details=db_error_details(exc)) from exc

        self.audit.record_attempt(form, client_ip, user_agent, razorpay_order_id=order_id)
        self.logger.info(
            "Pay Now order created: order=%s booking=%s reference=%s", order_id, booking.id, booking_reference
        )
        return {
            "razorpay_order_id": order_id,
            "amount": order.get("amount", to_minor_units(amount)),
            "currency": order.get("currency", self.currency),
            "booking_id": booking.id,
            "booking_reference": booking_reference,
        }

    def _reference_taken(self, reference):
        return self.session.query(Booking.id).filter(Booking.booking_reference == reference).first() is not None

    def _unique_booking_reference(self):
        prefix = reference_prefix(self.payment_env)
        reference = generate_booking_reference(prefix, rng=self.rng)
        attempts = 0
        while attempts < MAX_REFERENCE_ATTEMPTS and self._reference_taken(reference):
            reference = generate_booking_reference(prefix, rng=self.rng)
            attempts += 1
        if attempts == MAX_REFERENCE_ATTEMPTS and self._reference_taken(reference):
            self.logger.warning("Booking reference %s still collides after %d retries", reference, attempts)
        return reference
