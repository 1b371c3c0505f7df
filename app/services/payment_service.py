import json
import logging
from typing import Any, Dict, Optional, Union
from urllib.parse import quote
import httpx
from app.core.config import settings
from app.core.errors import BadPayload, ConfigError, UpstreamError
from app.core.form_encoding import urlencode_form
from app.core.security import SignatureVerificationError, verify_stripe_signature
from app.schemas.payment import CheckoutRequest
from app.services.order_service import OrderService

logger = logging.getLogger(__name__)

SESSION_COMPLETED = "checkout.session.completed"
SESSION_FAILED_EVENTS = {
    "checkout.session.expired",
    "checkout.session.async_payment_failed",
}

class PaymentService:
    def __init__(
        self,
        order_service: Optional[OrderService] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret_key = settings.STRIPE_SECRET_KEY
        self.webhook_secret = settings.STRIPE_WEBHOOK_SECRET
        self.api_base = settings.STRIPE_API_BASE
        self.order_service = order_service or OrderService()
        self.transport = transport

    def build_session_spec(self, checkout: CheckoutRequest, origin: str) -> Dict[str, Any]:
        order_id = checkout.order_ref
        query_order_id = quote(order_id, safe="")
        session_data: Dict[str, Any] = {
            "payment_method_types": ["card"],
            "mode": "payment",
            # {CHECKOUT_SESSION_ID} is substituted by Stripe on redirect
            "success_url": f"{origin}/success?session_id={{CHECKOUT_SESSION_ID}}&order_id={query_order_id}",
            "cancel_url": f"{origin}/cancel?order_id={query_order_id}",
            "metadata": {
                "order_id": order_id,
                "woocommerce_url": settings.WOOCOMMERCE_URL,
            },
            "line_items": [
                {
                    "price_data": {
                        "currency": checkout.currency or settings.DEFAULT_CURRENCY,
                        "product_data": {
                            "name": f"Order #{order_id}",
                            "description": f"Payment for {settings.STORE_NAME} order #{order_id}",
                        },
                        "unit_amount": checkout.unit_amount,
                    },
                    "quantity": 1,
                }
            ],
        }

        if checkout.customer_email:
            session_data["customer_email"] = checkout.customer_email

        return session_data

    async def create_checkout_session(self, checkout: CheckoutRequest, origin: str) -> Dict[str, Any]:
        """
        Opens a hosted Checkout Session and returns Stripe's session object.

        Raises ConfigError when no secret key is configured and UpstreamError
        when Stripe rejects the request or cannot be reached.
        """
        if not self.secret_key:
            raise ConfigError("STRIPE_SECRET_KEY not configured")

        session_data = self.build_session_spec(checkout, origin)
        logger.info(f"Creating checkout session for order {checkout.order_ref} ({checkout.unit_amount} minor units)")

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    f"{self.api_base}/checkout/sessions",
                    headers={
                        "Authorization": f"Bearer {self.secret_key}",
                        "Content-Type": "application/x-www-form-urlencoded",
                    },
                    content=urlencode_form(session_data),
                )
        except httpx.HTTPError as e:
            logger.error(f"Stripe request failed: {e}")
            raise UpstreamError("Failed to process checkout request")

        if not response.is_success:
            message = None
            try:
                error_data = response.json()
                logger.error(f"Stripe API error: {error_data}")
                error = error_data.get("error") if isinstance(error_data, dict) else None
                if isinstance(error, dict):
                    message = error.get("message")
            except ValueError:
                logger.error(f"Stripe API error: {response.status_code} {response.text}")
            raise UpstreamError(message)

        session = response.json()
        if not session.get("url"):
            logger.error(f"Stripe session {session.get('id')} has no redirect url")
            raise UpstreamError()

        logger.info(f"Checkout session {session.get('id')} created for order {checkout.order_ref}")
        return session

    def verify_signature(self, body: bytes, signature: Optional[str]):
        if not self.webhook_secret:
            logger.warning("STRIPE_WEBHOOK_SECRET not set; webhook signature verification is disabled")
            return

        try:
            verify_stripe_signature(
                body,
                signature,
                self.webhook_secret,
                tolerance=settings.STRIPE_WEBHOOK_TOLERANCE,
            )
        except SignatureVerificationError as e:
            logger.error(f"Invalid webhook signature: {e}")
            raise BadPayload("Invalid webhook signature")

    def parse_event(self, body: Union[bytes, str]) -> Dict[str, Any]:
        try:
            event = json.loads(body)
        except ValueError as e:
            logger.error(f"Webhook parsing error: {e}")
            raise BadPayload()

        if not isinstance(event, dict):
            logger.error(f"Webhook payload is not an object: {type(event).__name__}")
            raise BadPayload()
        return event

    async def process_webhook(self, body: bytes, signature: Optional[str]) -> Optional[bool]:
        """
        Verifies and dispatches a Stripe event.

        Returns the result of the order update, or None when the event needed
        no update. A failed update is not an error for the caller.
        """
        self.verify_signature(body, signature)
        event = self.parse_event(body)

        event_type = event.get("type")
        logger.info(f"Webhook event type: {event_type}")

        if event_type == SESSION_COMPLETED:
            session = event["data"]["object"]
            order_id = (session.get("metadata") or {}).get("order_id")
            if order_id:
                return await self.order_service.update_order_status(
                    str(order_id),
                    "processing",
                    session.get("payment_intent"),
                )
        elif event_type in SESSION_FAILED_EVENTS:
            session = event["data"]["object"]
            order_id = (session.get("metadata") or {}).get("order_id")
            if order_id:
                return await self.order_service.update_order_status(str(order_id), "failed")
        else:
            logger.info(f"Unhandled webhook event type: {event_type}")

        return None
