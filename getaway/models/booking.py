from getaway.extensions import db
from getaway.models.base import TimestampMixin, new_uuid
from getaway.models.enums import BookingStatus


class Booking(TimestampMixin, db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    booking_reference = db.Column(db.String(32), nullable=False, unique=True, index=True)
    customer_name = db.Column(db.String(120), nullable=False)
    customer_email = db.Column(db.String(255), nullable=False, index=True)
    customer_phone = db.Column(db.String(24), nullable=False)
    destination_id = db.Column(
        db.Integer, db.ForeignKey("destinations.id", ondelete="SET NULL"), nullable=True, index=True
    )

    total_amount = db.Column(db.Numeric(12, 2), nullable=False)
    currency = db.Column(db.String(8), nullable=False, default="INR")
    payment_type = db.Column(db.String(40), nullable=False)
    booking_status = db.Column(db.String(24), nullable=False, default=BookingStatus.PENDING, index=True)

    is_quick_payment = db.Column(db.Boolean, nullable=False, default=True)
    source = db.Column(db.String(40), nullable=True)
    quick_payment_notes = db.Column(db.Text, nullable=True)

    destination = db.relationship("Destination", back_populates="bookings")
    payment = db.relationship("Payment", back_populates="booking", uselist=False)

    __table_args__ = (
        db.CheckConstraint("total_amount > 0", name="ck_booking_amount_positive"),
    )
