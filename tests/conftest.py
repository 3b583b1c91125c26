import threading
from datetime import datetime

import pytest
from jose import jwt

from liquidpay import config
from liquidpay.auth import AuthSession
from liquidpay.backend import BackendClient
from liquidpay.checkout import CheckoutResult, CheckoutSDK, deliver
from liquidpay.controller import PaymentController
from liquidpay.models import Order
from liquidpay.notifications import NotificationPort, NotificationService

TEST_SECRET = "test-secret"

WEDNESDAY = datetime(2026, 10, 14, 12, 0)


class FakeCheckout(CheckoutSDK):
    """Checkout SDK that records opened sheets and completes them from a worker thread."""

    def __init__(self):
        self.opened = []

    def open(self, key_id, options, surface, delegate):
        self.opened.append({"key_id": key_id, "options": options, "surface": surface, "delegate": delegate})

    def complete(self, result: CheckoutResult):
        """Deliver ``result`` from a separate thread, as real SDKs do."""
        delegate = self.opened[-1]["delegate"]
        outcome = {}
        worker = threading.Thread(target=lambda: outcome.update(future=deliver(result, delegate)))
        worker.start()
        worker.join()
        return outcome["future"]


class FakeNotifier(NotificationPort):
    def __init__(self):
        self.sent = []
        self.should_fail = False

    def send(self, title, body, data=None):
        if self.should_fail:
            raise RuntimeError("Notification permission denied")
        self.sent.append({"title": title, "body": body, "data": data})


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setattr(config, "JWT_SECRET", TEST_SECRET)
    monkeypatch.setattr(config, "JWT_ALGORITHM", "HS256")


@pytest.fixture
def make_token():
    def _make(sub="user-42", **claims):
        return jwt.encode({"sub": sub, **claims}, TEST_SECRET, algorithm="HS256")

    return _make


@pytest.fixture
def auth(make_token):
    session = AuthSession()
    session.sign_in(make_token(phone_number="+919800000000"))
    return session


@pytest.fixture
def order():
    return Order(order_id="order_abc123", amount=12500, currency="INR", key_id="rzp_test_key")


@pytest.fixture
def backend(mocker, order):
    mock_backend = mocker.AsyncMock(spec=BackendClient)
    mock_backend.create_order.return_value = order
    return mock_backend


@pytest.fixture
def checkout():
    return FakeCheckout()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def make_controller(auth, backend, checkout, notifier):
    """Builds a controller bound to the running test loop."""

    def _make(**overrides):
        kwargs = dict(
            auth=auth,
            backend=backend,
            checkout=checkout,
            presenter=lambda: "root-view",
            notifications=NotificationService(notifier),
            success_delay=0.05,
            clock=lambda: WEDNESDAY,
        )
        kwargs.update(overrides)
        return PaymentController(**kwargs)

    return _make
