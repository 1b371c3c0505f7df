from fastapi.testclient import TestClient

from app.api.deps import get_payment_service
from app.core.config import settings
from app.main import app


def test_health_is_ok_without_configuration(client, monkeypatch):
    for name in ("STRIPE_SECRET_KEY", "WOOCOMMERCE_CONSUMER_KEY", "WOOCOMMERCE_CONSUMER_SECRET"):
        monkeypatch.setattr(settings, name, "")

    res = client.get("/health")

    assert res.status_code == 200
    assert res.text == "OK"


def test_success_page_shows_order(client):
    res = client.get("/success", params={"order_id": "42", "session_id": "cs_test_abc"})

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert "Payment Successful" in res.text
    assert "Order #42" in res.text
    assert "https://shop.example.com/my-account/orders/" in res.text
    assert "Test Store" in res.text


def test_cancel_page_without_order(client):
    res = client.get("/cancel")

    assert res.status_code == 200
    assert "Payment Cancelled" in res.text
    assert "Order #N/A" in res.text
    assert "https://shop.example.com/cart/" in res.text
    assert "https://shop.example.com/contact/" in res.text


def test_pages_escape_query_values(client):
    res = client.get("/cancel", params={"order_id": "<script>alert(1)</script>"})

    assert "<script>alert(1)</script>" not in res.text
    assert "&lt;script&gt;" in res.text


def test_unknown_path_is_404(client):
    res = client.get("/nope")

    assert res.status_code == 404
    assert res.text == "Checkout relay - Endpoint not found"


def test_wrong_method_is_404(client):
    res = client.get("/create-checkout")

    assert res.status_code == 404


def test_options_returns_empty_200(client):
    res = client.options("/create-checkout")

    assert res.status_code == 200
    assert res.content == b""


def test_cors_preflight(client):
    res = client.options(
        "/create-checkout",
        headers={
            "Origin": "https://shop.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == "*"
    assert "POST" in res.headers["access-control-allow-methods"]


def test_cors_preflight_with_extra_request_header(client):
    res = client.options(
        "/webhook",
        headers={
            "Origin": "https://shop.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, X-Requested-With",
        },
    )

    assert res.status_code == 200
    assert res.headers["access-control-allow-origin"] == "*"
    assert "authorization" in res.headers["access-control-allow-headers"].lower()


def test_cors_header_on_simple_request(client):
    res = client.get("/health", headers={"Origin": "https://shop.example.com"})

    assert res.headers["access-control-allow-origin"] == "*"


def test_uncaught_error_is_generic_500():
    class BrokenService:
        async def create_checkout_session(self, checkout, origin):
            raise RuntimeError("secret internals")

    app.dependency_overrides[get_payment_service] = lambda: BrokenService()
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            res = test_client.post("/create-checkout", json={"order_id": "1", "amount": "1"})
    finally:
        app.dependency_overrides.clear()

    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}
    assert "secret internals" not in res.text
