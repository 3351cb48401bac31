import pytest

from getaway import create_app
from getaway.extensions import db
from getaway.gateway import RazorpayGateway
from getaway.models import Destination
from getaway.models.enums import DestinationStatus
from getaway.services import AuditLogService, OrderService, VerificationService

TEST_SECRET = "rzp_test_secret"

VALID_FORM = {
    "customerName": "Jane Doe",
    "customerEmail": "jane@example.com",
    "customerPhone": "+919876543210",
    "destinationId": 3,
    "amount": 5000,
    "paymentType": "Booking Deposit",
}


class FakeGateway(RazorpayGateway):
    """Records orders instead of calling Razorpay; signature checks use the real HMAC code."""

    def __init__(self):
        super().__init__("rzp_test_key", TEST_SECRET)
        self.orders = []
        self.error = None

    def create_order(self, amount_minor, currency, receipt, notes=None):
        if self.error:
            raise self.error
        order = {
            "id": f"order_T{len(self.orders) + 1:012d}",
            "entity": "order",
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
            "status": "created",
        }
        self.orders.append(order)
        return order


class SequenceRng:
    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def randrange(self, _stop):
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(gateway):
    app = create_app("testing", gateway=gateway)
    with app.app_context():
        db.create_all()
        db.session.add_all(
            [
                Destination(id=3, name="Goa", slug="goa", country="India", status=DestinationStatus.PUBLISHED),
                Destination(id=5, name="Bali", slug="bali", country="Indonesia", status=DestinationStatus.PUBLISHED),
                Destination(id=9, name="Iceland", slug="iceland", country="Iceland", status=DestinationStatus.DRAFT),
            ]
        )
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def audit(app):
    return AuditLogService(db.session, app.logger)


@pytest.fixture
def order_service(app, gateway, audit):
    return OrderService(db.session, gateway, app.config, audit, app.logger)


@pytest.fixture
def verification_service(app, gateway, audit):
    return VerificationService(db.session, gateway, audit, app.logger)


@pytest.fixture
def sign(gateway):
    def _sign(order_id, payment_id):
        return gateway.expected_signature(order_id, payment_id)

    return _sign


@pytest.fixture
def valid_form():
    return dict(VALID_FORM)
