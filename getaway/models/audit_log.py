from getaway.extensions import db
from getaway.models.base import utcnow


class PaymentAuditLog(db.Model):
    """Append-only record of payment attempts and security events."""

    __tablename__ = "payment_audit_log"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    event_type = db.Column(db.String(40), nullable=False, index=True)
    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    customer_email = db.Column(db.String(255), nullable=True)
    customer_phone = db.Column(db.String(24), nullable=True)
    amount = db.Column(db.Numeric(12, 2), nullable=True)
    razorpay_order_id = db.Column(db.String(64), nullable=True, index=True)
    error_message = db.Column(db.Text, nullable=True)
    meta = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
