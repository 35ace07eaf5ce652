import pytest

from backoffice import create_app
from backoffice.extensions import db
from backoffice.models import Order
from backoffice.utils.fraud_check_client import RiskLookup
from backoffice.utils.steadfast_client import Consignment, DeliveryStatus


@pytest.fixture()
def app():
    app = create_app({
        "TESTING": True,
        "ENV_NAME": "test",
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_order(app):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "order_id": f"ORD-{1000 + counter['n']}",
            "customer_name": "Rahim Uddin",
            "phone": "01774226088",
            "address": "House 12, Road 4, Dhanmondi, Dhaka",
            "items": [
                {"name": "Miniket Rice 5kg", "quantity": 2, "price": 450},
                {"name": "Soybean Oil 1L", "quantity": 1, "price": 190},
            ],
            "total": 1090.0,
        }
        fields.update(overrides)
        order = Order(**fields)
        db.session.add(order)
        db.session.commit()
        return order

    return _make


class FakeFraudCheck:
    """Courier-check double that replays queued lookups."""

    def __init__(self, *lookups):
        self.lookups = list(lookups)
        self.phones = []

    def lookup(self, phone):
        self.phones.append(phone)
        item = self.lookups.pop(0)
        if isinstance(item, RiskLookup):
            return item
        return RiskLookup(success=True, payload=item)


class FakeSteadfast:
    """Steadfast double that records every call."""

    def __init__(self, consignment=None, delivery_status="in_review", balance=1520.5, error=None, invoice_status=None):
        self.consignment = consignment or Consignment(consignment_id=1424107, tracking_code="15BAEB8A", status="in_review")
        self.delivery_status = delivery_status
        self.balance = balance
        self.error = error
        self.invoice_status = invoice_status
        self.calls = []

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    def create_order(self, params):
        self.calls.append(("create_order", params))
        self._maybe_fail()
        return self.consignment

    def status_by_tracking_code(self, code):
        self.calls.append(("status_by_tracking_code", code))
        self._maybe_fail()
        return DeliveryStatus(delivery_status=self.delivery_status)

    def status_by_consignment_id(self, consignment_id):
        self.calls.append(("status_by_consignment_id", consignment_id))
        self._maybe_fail()
        return DeliveryStatus(delivery_status=self.delivery_status)

    def status_by_invoice(self, invoice):
        self.calls.append(("status_by_invoice", invoice))
        if self.invoice_status is not None:
            return DeliveryStatus(delivery_status=self.invoice_status)
        self._maybe_fail()
        return DeliveryStatus(delivery_status=self.delivery_status)

    def get_balance(self):
        self.calls.append(("get_balance", None))
        self._maybe_fail()
        return self.balance


@pytest.fixture()
def fake_fraud_check():
    return FakeFraudCheck


@pytest.fixture()
def fake_steadfast():
    return FakeSteadfast
