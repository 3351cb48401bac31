import re
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from conftest import SequenceRng
from getaway.errors import BookingConflict, InvalidInput, NotFound, OutOfRange, PersistenceError, UpstreamError
from getaway.extensions import db
from getaway.models import Booking, Payment, PaymentAuditLog
from getaway.models.enums import AuditEvent, BookingStatus, PaymentStatus
from getaway.services import AuditLogService, OrderService
from getaway.services.order_service import generate_booking_reference, reference_prefix, to_minor_units

REFERENCE_PATTERN = re.compile(r"^(LIVE|TEST)\d{8}\d{4}$")


def today_stamp():
    return datetime.now(timezone.utc).strftime("%Y%m%d")


def test_reference_format():
    assert reference_prefix("production") == "LIVE"
    assert reference_prefix("testing") == "TEST"
    assert reference_prefix("development") == "TEST"
    reference = generate_booking_reference("LIVE", datetime(2025, 1, 23).date(), SequenceRng([42]))
    assert reference == "LIVE202501230042"


def test_minor_units_rounding():
    assert to_minor_units(Decimal("5000")) == 500000
    assert to_minor_units(Decimal("999.995")) == 100000
    assert to_minor_units(Decimal("10.01")) == 1001


def test_create_order_persists_pending_pair(order_service, gateway, valid_form):
    result = order_service.create_order(valid_form, client_ip="203.0.113.7", user_agent="pytest")

    assert REFERENCE_PATTERN.match(result["booking_reference"])
    assert result["booking_reference"].startswith("TEST")
    assert result["amount"] == 500000
    assert result["currency"] == "INR"
    assert result["razorpay_order_id"] == gateway.orders[0]["id"]

    booking = db.session.get(Booking, result["booking_id"])
    assert booking.booking_status == BookingStatus.PENDING
    assert booking.total_amount == Decimal("5000.00")
    assert booking.destination_id == 3
    assert booking.source == "pay_now_modal"
    assert booking.payment.payment_status == PaymentStatus.CREATED
    assert booking.payment.razorpay_order_id == result["razorpay_order_id"]

    order = gateway.orders[0]
    assert order["receipt"] == result["booking_reference"]
    assert order["notes"]["destination"] == "Goa"

    entry = db.session.query(PaymentAuditLog).one()
    assert entry.event_type == AuditEvent.PAYMENT_ATTEMPT
    assert entry.error_message is None
    assert entry.razorpay_order_id == result["razorpay_order_id"]
    assert entry.customer_email == "ja***@example.com"
    assert entry.customer_phone == "********3210"
    assert entry.ip_address == "203.0.113.7"


def test_notes_are_trimmed_and_stored(order_service, valid_form):
    valid_form["notes"] = "  Honeymoon trip  "
    result = order_service.create_order(valid_form)
    assert db.session.get(Booking, result["booking_id"]).quick_payment_notes == "Honeymoon trip"


def test_missing_fields_rejected_before_gateway(order_service, gateway, valid_form):
    del valid_form["customerPhone"]
    with pytest.raises(InvalidInput, match="Missing required fields"):
        order_service.create_order(valid_form)
    assert gateway.orders == []
    assert db.session.query(PaymentAuditLog).one().error_message == "Missing required fields"


def test_amount_below_configured_minimum(order_service, gateway, valid_form):
    valid_form["amount"] = 50
    with pytest.raises(OutOfRange) as excinfo:
        order_service.create_order(valid_form)

    assert excinfo.value.status_code == 400
    assert "Minimum payment amount is ₹500" in excinfo.value.message
    assert gateway.orders == []
    assert db.session.query(Booking).count() == 0
    entry = db.session.query(PaymentAuditLog).one()
    assert entry.event_type == AuditEvent.AMOUNT_VALIDATION_FAILED
    assert "Minimum payment amount" in entry.error_message


def test_multiple_failures_are_invalid_input(order_service, valid_form):
    valid_form["customerEmail"] = "jane"
    valid_form["amount"] = 10
    with pytest.raises(InvalidInput) as excinfo:
        order_service.create_order(valid_form)
    assert not isinstance(excinfo.value, OutOfRange)
    assert set(excinfo.value.details) == {"customerEmail", "amount"}


def test_amount_bounds_follow_configuration(app, gateway, audit, valid_form):
    app.config["PAYMENT_MIN_AMOUNT"] = 10000
    service = OrderService(db.session, gateway, app.config, audit, app.logger)
    with pytest.raises(OutOfRange, match="₹10,000"):
        service.create_order(valid_form)


def test_live_floor_enforced_outside_development(app, gateway, audit, valid_form):
    app.config["PAYMENT_MIN_AMOUNT"] = 10
    valid_form["amount"] = 50

    service = OrderService(db.session, gateway, app.config, audit, app.logger)
    with pytest.raises(OutOfRange, match="₹100"):
        service.create_order(valid_form)
    assert gateway.orders == []

    app.config["PAYMENT_ENV"] = "development"
    service = OrderService(db.session, gateway, app.config, audit, app.logger)
    result = service.create_order(valid_form)
    assert result["amount"] == 5000


def test_production_uses_live_prefix(app, gateway, audit, valid_form):
    app.config["PAYMENT_ENV"] = "production"
    service = OrderService(db.session, gateway, app.config, audit, app.logger)
    assert service.create_order(valid_form)["booking_reference"].startswith("LIVE")


@pytest.mark.parametrize("destination_id", [404, 9, "abc", True, 3.9, "3.0", "-3"])
def test_unknown_or_unpublished_destination(order_service, gateway, valid_form, destination_id):
    valid_form["destinationId"] = destination_id
    with pytest.raises(NotFound) as excinfo:
        order_service.create_order(valid_form)

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "Invalid destination selected"
    assert gateway.orders == []
    entry = db.session.query(PaymentAuditLog).one()
    assert entry.error_message == f"Invalid destination ID: {destination_id}"


def test_digit_string_destination_is_accepted(order_service, valid_form):
    valid_form["destinationId"] = " 3 "
    result = order_service.create_order(valid_form)
    assert db.session.get(Booking, result["booking_id"]).destination_id == 3


def test_gateway_failure_is_audited_and_nothing_persisted(order_service, gateway, valid_form):
    gateway.error = UpstreamError("Authentication failed")
    with pytest.raises(UpstreamError) as excinfo:
        order_service.create_order(valid_form)

    assert excinfo.value.status_code == 500
    assert db.session.query(Booking).count() == 0
    assert db.session.query(Payment).count() == 0
    entry = db.session.query(PaymentAuditLog).one()
    assert entry.error_message == "Authentication failed"
    assert entry.event_type == AuditEvent.PAYMENT_FAILURE


def test_unexpected_gateway_exception_becomes_upstream_error(order_service, gateway, valid_form):
    gateway.error = RuntimeError("socket closed")
    with pytest.raises(UpstreamError, match="Failed to create payment order"):
        order_service.create_order(valid_form)

    entry = db.session.query(PaymentAuditLog).one()
    assert entry.error_message == "Failed to create payment order"
    assert entry.event_type == AuditEvent.PAYMENT_FAILURE


def test_reference_collision_is_retried(app, gateway, audit, valid_form):
    first = OrderService(db.session, gateway, app.config, audit, app.logger, rng=SequenceRng([42]))
    taken = first.create_order(valid_form)["booking_reference"]
    assert taken.endswith("0042")

    rng = SequenceRng([42, 42, 43])
    second = OrderService(db.session, gateway, app.config, audit, app.logger, rng=rng)
    reference = second.create_order(valid_form)["booking_reference"]

    assert reference == f"TEST{today_stamp()}0043"
    assert rng.calls == 3


def test_reference_retries_are_bounded(app, gateway, audit, valid_form):
    OrderService(db.session, gateway, app.config, audit, app.logger, rng=SequenceRng([7])).create_order(valid_form)

    rng = SequenceRng([7])
    service = OrderService(db.session, gateway, app.config, audit, app.logger, rng=rng)
    with pytest.raises(BookingConflict) as excinfo:
        service.create_order(valid_form)

    assert rng.calls == 6
    assert excinfo.value.status_code == 409
    assert isinstance(excinfo.value, PersistenceError)
    assert db.session.query(Booking).count() == 1


def test_sequential_orders_get_distinct_references(order_service, valid_form):
    references = {order_service.create_order(valid_form)["booking_reference"] for _ in range(5)}
    assert len(references) == 5
    assert db.session.query(Booking).count() == 5


def _fail_commit_number(monkeypatch, failing_call):
    real_commit = db.session.commit
    calls = {"n": 0}

    def flaky_commit():
        calls["n"] += 1
        if calls["n"] == failing_call:
            raise OperationalError("INSERT", {}, Exception("connection reset"))
        return real_commit()

    monkeypatch.setattr(db.session, "commit", flaky_commit)


def test_booking_insert_failure(order_service, valid_form, monkeypatch):
    _fail_commit_number(monkeypatch, 1)
    with pytest.raises(PersistenceError) as excinfo:
        order_service.create_order(valid_form)

    assert excinfo.value.message == "Failed to create booking record"
    assert excinfo.value.status_code == 500
    assert db.session.query(Booking).count() == 0
    assert db.session.query(Payment).count() == 0
    entry = db.session.query(PaymentAuditLog).one()
    assert entry.error_message == "Failed to create booking record"
    assert entry.event_type == AuditEvent.PAYMENT_FAILURE
    assert "connection reset" not in str(entry.meta)


def test_payment_insert_failure_is_reported_separately(order_service, valid_form, monkeypatch):
    _fail_commit_number(monkeypatch, 2)
    with pytest.raises(PersistenceError) as excinfo:
        order_service.create_order(valid_form)

    assert excinfo.value.message == "Failed to create payment record"
    assert db.session.query(Booking).count() == 1
    assert db.session.query(Payment).count() == 0


def test_duplicate_order_id_keeps_raw_contact_out_of_audit(order_service, gateway, valid_form):
    order_service.create_order(valid_form)
    gateway.orders.clear()

    with pytest.raises(PersistenceError) as excinfo:
        order_service.create_order(valid_form)

    assert excinfo.value.message == "Failed to create payment record"
    assert "jane@example.com" not in str(excinfo.value.details)
    entry = db.session.query(PaymentAuditLog).filter_by(event_type=AuditEvent.PAYMENT_FAILURE).one()
    assert entry.error_message == "Failed to create payment record"
    assert entry.razorpay_order_id == gateway.orders[0]["id"]
    assert entry.customer_email == "ja***@example.com"
    for raw in ("jane@example.com", "+919876543210"):
        assert raw not in entry.error_message
        assert raw not in str(entry.meta)


class BrokenSession:
    def __init__(self):
        self.rolled_back = False

    def add(self, _obj):
        pass

    def commit(self):
        raise SQLAlchemyError("audit table is read-only")

    def rollback(self):
        self.rolled_back = True


def test_audit_failures_never_fail_the_order(app, gateway, valid_form):
    broken = BrokenSession()
    service = OrderService(db.session, gateway, app.config, AuditLogService(broken, app.logger), app.logger)
    result = service.create_order(valid_form)

    assert result["booking_reference"]
    assert broken.rolled_back
    assert db.session.query(PaymentAuditLog).count() == 0
