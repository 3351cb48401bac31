from getaway.models.admin_control import AdminControl
from getaway.models.audit_log import PaymentAuditLog
from getaway.models.booking import Booking
from getaway.models.destination import Destination
from getaway.models.payment import Payment

__all__ = [
    "AdminControl",
    "Booking",
    "Destination",
    "Payment",
    "PaymentAuditLog",
]
