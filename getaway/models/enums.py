PAYMENT_TYPES = (
    "Booking Deposit",
    "Balance Payment",
    "Full Package Payment",
    "Advance Payment",
    "Other",
)


class BookingStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    ALL = (PENDING, CONFIRMED, CANCELLED, COMPLETED)


class PaymentStatus:
    CREATED = "created"
    PENDING = "pending"
    CAPTURED = "captured"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    ALL = (CREATED, PENDING, CAPTURED, FAILED, CANCELLED, REFUNDED)


class DestinationStatus:
    PUBLISHED = "published"
    DRAFT = "draft"
    ARCHIVED = "archived"


class AuditEvent:
    PAYMENT_ATTEMPT = "payment_attempt"
    PAYMENT_SUCCESS = "payment_success"
    PAYMENT_FAILURE = "payment_failure"
    RATE_LIMIT_HIT = "rate_limit_hit"
    INVALID_SIGNATURE = "invalid_signature"
    AMOUNT_VALIDATION_FAILED = "amount_validation_failed"


PAY_NOW_FEATURE = "pay_now"
