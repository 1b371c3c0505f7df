import json
import pytest
import httpx
from fastapi.testclient import TestClient

from app.api.deps import get_payment_service
from app.core.config import settings
from app.main import app
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService


class RecordingTransport:
    """MockTransport wrapper that keeps every request it receives."""

    def __init__(self, status_code: int = 200, payload=None, text=None):
        self.requests = []
        self.status_code = status_code
        self.payload = payload
        self.text = text
        self.error = None
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.payload if self.payload is not None else {})

    def respond(self, status_code: int, payload=None, text=None):
        self.status_code = status_code
        self.payload = payload
        self.text = text

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    monkeypatch.setattr(settings, "STORE_NAME", "Test Store")
    monkeypatch.setattr(settings, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(settings, "STRIPE_WEBHOOK_SECRET", "")
    monkeypatch.setattr(settings, "STRIPE_API_BASE", "https://api.stripe.test/v1")
    monkeypatch.setattr(settings, "STRIPE_WEBHOOK_TOLERANCE", 300)
    monkeypatch.setattr(settings, "WOOCOMMERCE_URL", "https://shop.example.com")
    monkeypatch.setattr(settings, "WOOCOMMERCE_CONSUMER_KEY", "ck_test")
    monkeypatch.setattr(settings, "WOOCOMMERCE_CONSUMER_SECRET", "cs_test")
    monkeypatch.setattr(settings, "PUBLIC_BASE_URL", "")
    monkeypatch.setattr(settings, "DEFAULT_CURRENCY", "usd")
    return settings


@pytest.fixture()
def stripe_api():
    return RecordingTransport(
        payload={"id": "cs_test_abc", "url": "https://checkout.stripe.test/c/pay/cs_test_abc"},
    )


@pytest.fixture()
def woocommerce_api():
    return RecordingTransport(payload={"id": 42, "status": "processing"})


@pytest.fixture()
def client(stripe_api, woocommerce_api):
    def override_payment_service():
        return PaymentService(
            order_service=OrderService(transport=woocommerce_api.transport),
            transport=stripe_api.transport,
        )

    app.dependency_overrides[get_payment_service] = override_payment_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
