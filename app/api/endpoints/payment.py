from typing import Optional
from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from app.api.deps import get_checkout_request, get_payment_service, get_public_origin
from app.core.errors import BadPayload
from app.schemas.common import ErrorResponse
from app.schemas.payment import CheckoutRequest
from app.services.payment_service import PaymentService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/create-checkout",
    status_code=status.HTTP_303_SEE_OTHER,
    responses={
        303: {"description": "Redirect to the Stripe-hosted payment page"},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def create_checkout(
    checkout: CheckoutRequest = Depends(get_checkout_request),
    origin: str = Depends(get_public_origin),
    service: PaymentService = Depends(get_payment_service),
):
    """
    Create a Stripe Checkout Session for a WooCommerce order.

    Accepts JSON or form fields: order_id, amount, currency, customer_email, customer_name.
    Redirects (303) the browser to the hosted payment page.
    """
    session = await service.create_checkout_session(checkout, origin)
    # 303 makes the browser follow with GET even after a form POST
    return RedirectResponse(session["url"], status_code=status.HTTP_303_SEE_OTHER)


@router.post("/webhook", response_class=PlainTextResponse)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    service: PaymentService = Depends(get_payment_service),
):
    """
    Handle Stripe webhook events.

    - Verifies the stripe-signature header when STRIPE_WEBHOOK_SECRET is set
    - checkout.session.completed marks the order processing
    - checkout.session.expired / async_payment_failed mark the order failed
    - Returns 200 even when the WooCommerce update fails
    """
    body = await request.body()

    try:
        await service.process_webhook(body, stripe_signature)
    except BadPayload:
        raise
    except Exception as e:
        logger.exception(f"Webhook processing error: {e}")
        return PlainTextResponse("Webhook processing failed", status_code=500)

    return PlainTextResponse("Webhook processed", status_code=200)
