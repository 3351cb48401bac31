from getaway.services.audit_service import AuditLogService
from getaway.services.booking_lookup_service import BookingLookupService
from getaway.services.destination_service import DestinationService
from getaway.services.feature_service import FeatureService
from getaway.services.order_service import OrderService
from getaway.services.receipt_service import ReceiptService
from getaway.services.verification_service import VerificationService

__all__ = [
    "AuditLogService",
    "BookingLookupService",
    "DestinationService",
    "FeatureService",
    "OrderService",
    "ReceiptService",
    "VerificationService",
]
