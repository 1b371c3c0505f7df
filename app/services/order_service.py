import logging
from typing import Optional
import httpx
from app.core.config import settings
from app.schemas.payment import OrderStatus, OrderUpdate

logger = logging.getLogger(__name__)

class OrderService:
    """
    Pushes payment outcomes into the WooCommerce order resource.

    Failures are reported through the boolean return value, never raised, so
    that webhook handling can always acknowledge the event.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = settings.WOOCOMMERCE_URL
        self.consumer_key = settings.WOOCOMMERCE_CONSUMER_KEY
        self.consumer_secret = settings.WOOCOMMERCE_CONSUMER_SECRET
        self.transport = transport

    def order_url(self, order_id: str) -> str:
        return f"{self.base_url}/wp-json/wc/v3/orders/{order_id}"

    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        transaction_id: Optional[str] = None,
    ) -> bool:
        if not self.consumer_key or not self.consumer_secret:
            logger.error("WooCommerce API credentials not configured")
            return False

        update = OrderUpdate.for_payment(status, transaction_id)

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.put(
                    self.order_url(order_id),
                    auth=(self.consumer_key, self.consumer_secret),
                    json=update.model_dump(exclude_none=True),
                )
        except httpx.HTTPError as e:
            logger.error(f"Error updating WooCommerce order {order_id}: {e}")
            return False

        if not response.is_success:
            logger.error(f"Failed to update order {order_id}: {response.status_code} {response.text}")
            return False

        logger.info(f"Order {order_id} updated to {status}")
        return True
