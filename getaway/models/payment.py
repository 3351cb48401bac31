from getaway.extensions import db
from getaway.models.base import TimestampMixin, new_uuid
from getaway.models.enums import PaymentStatus


class Payment(TimestampMixin, db.Model):
    __tablename__ = "payments"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    booking_id = db.Column(
        db.String(36), db.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    razorpay_order_id = db.Column(db.String(64), nullable=False, unique=True, index=True)
    razorpay_payment_id = db.Column(db.String(64), nullable=True, index=True)

    amount = db.Column(db.Numeric(12, 2), nullable=False)
    currency = db.Column(db.String(8), nullable=False, default="INR")
    customer_email = db.Column(db.String(255), nullable=False)
    customer_phone = db.Column(db.String(24), nullable=True)
    payment_status = db.Column(db.String(24), nullable=False, default=PaymentStatus.CREATED, index=True)
    payment_method = db.Column(db.String(40), nullable=True)
    failure_reason = db.Column(db.Text, nullable=True)
    payment_captured_at = db.Column(db.DateTime(timezone=True), nullable=True)

    booking = db.relationship("Booking", back_populates="payment")

    __table_args__ = (
        db.Index("ix_payments_gateway_payment_status", "razorpay_payment_id", "payment_status"),
    )
