from sqlalchemy.exc import SQLAlchemyError

from getaway.errors import NotFound, PersistenceError, SignatureMismatch
from getaway.models import Booking, Payment
from getaway.models.base import utcnow
from getaway.models.enums import AuditEvent, BookingStatus, PaymentStatus
from getaway.services.order_service import db_error_details


class VerificationService:
    """
    Confirms a booking once the checkout callback proves the payment.

    The HMAC check runs before any row is read or written.
    """

    def __init__(self, session, gateway, audit, logger):
        self.session = session
        self.gateway = gateway
        self.audit = audit
        self.logger = logger

    def verify(self, order_id, payment_id, signature, client_ip=None, user_agent=None):
        if not self.gateway.verify_signature(order_id, payment_id, signature):
            self.logger.warning("Invalid payment signature for order %s", order_id)
            self.audit.record(
                AuditEvent.INVALID_SIGNATURE,
                ip_address=client_ip,
                user_agent=user_agent,
                razorpay_order_id=order_id if isinstance(order_id, str) else None,
                error_message="Invalid payment signature",
            )
            raise SignatureMismatch("Invalid payment signature")

        payment = self.session.query(Payment).filter(Payment.razorpay_order_id == order_id).first()
        if not payment:
            self.logger.error("Verified payment for unknown order %s", order_id)
            raise NotFound("Payment record not found")

        booking = self.session.get(Booking, payment.booking_id)
        if payment.payment_status == PaymentStatus.CAPTURED:
            self.logger.info("Payment for order %s already captured", order_id)
            return self._result(payment, booking, already_processed=True)

        payment.razorpay_payment_id = payment_id
        payment.payment_status = PaymentStatus.CAPTURED
        payment.payment_captured_at = utcnow()
        if booking:
            booking.booking_status = BookingStatus.CONFIRMED
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            self.logger.error("Failed to capture payment for order %s: %s", order_id, exc)
            raise PersistenceError("Failed to update payment", details=db_error_details(exc)) from exc

        self.audit.record(
            AuditEvent.PAYMENT_SUCCESS,
            ip_address=client_ip,
            user_agent=user_agent,
            customer_email=payment.customer_email,
            customer_phone=payment.customer_phone,
            amount=payment.amount,
            razorpay_order_id=order_id,
            meta={"booking_id": payment.booking_id, "razorpay_payment_id": payment_id},
        )
        self.logger.info("Payment %s captured, booking %s confirmed", payment_id, payment.booking_id)
        return self._result(payment, booking, already_processed=False)

    @staticmethod
    def _result(payment, booking, already_processed):
        return {
            "bookingId": payment.booking_id,
            "bookingReference": booking.booking_reference if booking else None,
            "paymentId": payment.razorpay_payment_id,
            "message": "Payment already processed" if already_processed else "Payment verified successfully",
        }
