import logging
from typing import Any, Awaitable, Callable, Dict
from fastapi import Request
from pydantic import ValidationError as PydanticValidationError
from app.core.config import settings
from app.core.errors import ValidationError
from app.schemas.payment import CheckoutRequest
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("order_id", "amount")

# Services are built per request; nothing is shared between requests.

def get_order_service() -> OrderService:
    return OrderService()

def get_payment_service() -> PaymentService:
    return PaymentService(order_service=get_order_service())


async def _read_json(request: Request) -> Dict[str, Any]:
    data = await request.json()
    if not isinstance(data, dict):
        raise ValueError("JSON body must be an object")
    return data

async def _read_form(request: Request) -> Dict[str, Any]:
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}

def _select_reader(content_type: str) -> Callable[[Request], Awaitable[Dict[str, Any]]]:
    if "application/json" in content_type.lower():
        return _read_json
    return _read_form


def build_checkout_request(data: Dict[str, Any]) -> CheckoutRequest:
    """
    Turns a raw JSON or form payload into a CheckoutRequest.

    Blank strings count as absent so that empty form fields behave like
    missing JSON keys.
    """
    cleaned = {
        key: value
        for key, value in data.items()
        if value is not None and not (isinstance(value, str) and not value.strip())
    }

    if any(field not in cleaned for field in REQUIRED_FIELDS):
        raise ValidationError("Missing required fields: order_id and amount are required")

    try:
        return CheckoutRequest.model_validate(cleaned)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "body"
        reason = first.get("ctx", {}).get("error") or first.get("msg")
        raise ValidationError(f"Invalid {field}: {reason}")


async def get_checkout_request(request: Request) -> CheckoutRequest:
    reader = _select_reader(request.headers.get("content-type", ""))
    try:
        data = await reader(request)
    except ValueError as e:
        logger.warning(f"Unreadable checkout payload: {e}")
        raise ValidationError("Invalid request body")
    return build_checkout_request(data)


def get_public_origin(request: Request) -> str:
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL
    return str(request.base_url).rstrip("/")
