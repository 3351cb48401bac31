import re

from getaway.errors import InvalidInput, NotFound
from getaway.models import Booking, Destination, Payment
from getaway.models.enums import BookingStatus, PaymentStatus

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


class BookingLookupService:
    """Read path for the confirmation page. Only payment-confirmed bookings are ever returned."""

    def __init__(self, session):
        self.session = session

    def _confirmed_booking(self, booking_id):
        if not booking_id:
            return None
        return (
            self.session.query(Booking)
            .filter(Booking.id == str(booking_id), Booking.booking_status == BookingStatus.CONFIRMED)
            .first()
        )

    def _captured_payment(self, payment_id):
        return (
            self.session.query(Payment)
            .filter(Payment.razorpay_payment_id == payment_id, Payment.payment_status == PaymentStatus.CAPTURED)
            .first()
        )

    def lookup(self, booking_id=None, payment_id=None):
        if not booking_id and not payment_id:
            raise InvalidInput("Missing booking ID or payment ID")

        booking = self._confirmed_booking(booking_id)
        if not booking and payment_id:
            payment = self._captured_payment(payment_id)
            if payment:
                booking = self._confirmed_booking(payment.booking_id)

        if not booking:
            raise NotFound("Booking not found", details="No booking data found")
        return self.details(booking, fallback_payment_id=payment_id)

    def get_confirmed(self, booking_id, payment_id=None):
        if not booking_id:
            raise InvalidInput("Missing booking ID")
        if not UUID_PATTERN.match(str(booking_id)):
            raise InvalidInput("Invalid booking ID format")

        booking = self._confirmed_booking(booking_id)
        if not booking:
            raise NotFound("Booking not found", details=f"No confirmed booking {booking_id}")

        gateway_payment_id = booking.payment.razorpay_payment_id if booking.payment else None
        if payment_id and gateway_payment_id != payment_id:
            raise InvalidInput("Payment ID does not match booking")
        return self.details(booking)

    def find_by_payment(self, payment_id):
        if not payment_id:
            raise InvalidInput("Missing payment ID")
        return self.lookup(payment_id=payment_id)

    def details(self, booking, fallback_payment_id=None):
        destination = None
        if booking.destination_id is not None:
            destination = self.session.get(Destination, booking.destination_id)
        payment = booking.payment

        return {
            "id": booking.id,
            "booking_reference": booking.booking_reference or "N/A",
            "customer_name": booking.customer_name or "Unknown",
            "customer_email": booking.customer_email or "N/A",
            "customer_phone": booking.customer_phone or "N/A",
            "total_amount": float(booking.total_amount or 0),
            "currency": booking.currency or "INR",
            "payment_type": booking.payment_type or "unknown",
            "quick_payment_notes": booking.quick_payment_notes or "",
            "destination_name": destination.name if destination else "Unknown",
            "destination_country": destination.country if destination else "Unknown",
            "payment_id": (payment.razorpay_payment_id if payment else None) or fallback_payment_id or "Unknown",
            "created_at": booking.created_at.isoformat() if booking.created_at else None,
        }
