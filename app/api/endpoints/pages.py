from html import escape
from typing import Optional
from fastapi import APIRouter
from fastapi.responses import HTMLResponse
from app.core.config import settings

router = APIRouter()

PAGE_STYLE = """
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
      background: linear-gradient(135deg, %(gradient_from)s 0%%, %(gradient_to)s 100%%);
      min-height: 100vh;
      display: flex;
      align-items: center;
      justify-content: center;
      padding: 20px;
    }
    .container {
      background: white;
      border-radius: 20px;
      padding: 40px;
      max-width: 500px;
      width: 100%%;
      box-shadow: 0 20px 60px rgba(0,0,0,0.3);
      text-align: center;
    }
    .icon {
      width: 80px;
      height: 80px;
      margin: 0 auto 30px;
      background: %(icon_color)s;
      border-radius: 50%%;
      display: flex;
      align-items: center;
      justify-content: center;
    }
    .icon svg { width: 40px; height: 40px; stroke: white; stroke-width: 3; }
    h1 { color: #333; margin-bottom: 15px; font-size: 28px; }
    .order-info { background: #f7f7f7; padding: 20px; border-radius: 10px; margin: 25px 0; }
    .order-id { font-size: 18px; color: #666; }
    .message { color: #666; line-height: 1.6; margin-bottom: 30px; }
    .btn {
      display: inline-block;
      padding: 12px 30px;
      margin: 5px;
      background: %(button_color)s;
      color: white;
      text-decoration: none;
      border-radius: 25px;
      font-weight: 600;
    }
    .btn-secondary { background: #6c757d; }
"""

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>%(title)s - %(store)s</title>
  <style>%(style)s</style>
</head>
<body>
  <div class="container">
    <div class="icon">
      <svg fill="none" stroke="currentColor" viewBox="0 0 24 24">
        <path stroke-linecap="round" stroke-linejoin="round" d="%(icon_path)s"></path>
      </svg>
    </div>
    <h1>%(heading)s</h1>
    <div class="order-info">
      <div class="order-id">Order #%(order_id)s</div>
      %(order_note)s
    </div>
    <p class="message">%(message)s</p>
    <div>%(links)s</div>
  </div>
</body>
</html>
"""

CHECK_ICON = "M5 13l4 4L19 7"
CROSS_ICON = "M6 18L18 6M6 6l12 12"


def _link(href: str, label: str, secondary: bool = False) -> str:
    css = "btn btn-secondary" if secondary else "btn"
    return f'<a href="{escape(href)}" class="{css}">{escape(label)}</a>'


def render_page(
    *,
    title: str,
    heading: str,
    order_id: Optional[str],
    message: str,
    links: str,
    icon_path: str,
    gradient: tuple,
    icon_color: str,
    button_color: str,
    order_note: str = "",
) -> str:
    style = PAGE_STYLE % {
        "gradient_from": gradient[0],
        "gradient_to": gradient[1],
        "icon_color": icon_color,
        "button_color": button_color,
    }
    return PAGE_TEMPLATE % {
        "title": escape(title),
        "store": escape(settings.STORE_NAME),
        "style": style,
        "icon_path": icon_path,
        "heading": escape(heading),
        "order_id": escape(order_id or "N/A"),
        "order_note": order_note,
        "message": escape(message),
        "links": links,
    }


@router.get("/success", response_class=HTMLResponse)
async def success_page(order_id: Optional[str] = None, session_id: Optional[str] = None):
    """
    Landing page Stripe redirects to after a completed payment.
    """
    html = render_page(
        title="Payment Successful",
        heading="Payment Successful!",
        order_id=order_id,
        order_note='<small style="color: #999;">Transaction confirmed</small>',
        message=(
            "Thank you for your purchase! Your payment has been processed successfully. "
            "You will receive an order confirmation email shortly with all the details."
        ),
        links=_link(f"{settings.WOOCOMMERCE_URL}/my-account/orders/", "View Your Orders"),
        icon_path=CHECK_ICON,
        gradient=("#667eea", "#764ba2"),
        icon_color="#4CAF50",
        button_color="#667eea",
    )
    return HTMLResponse(content=html)


@router.get("/cancel", response_class=HTMLResponse)
async def cancel_page(order_id: Optional[str] = None):
    """
    Landing page Stripe redirects to when the customer abandons checkout.
    """
    html = render_page(
        title="Payment Cancelled",
        heading="Payment Cancelled",
        order_id=order_id,
        message=(
            "Your payment was cancelled. No charges have been made to your account. "
            "You can try again or contact our support team if you need assistance."
        ),
        links=(
            _link(f"{settings.WOOCOMMERCE_URL}/cart/", "Return to Cart")
            + _link(f"{settings.WOOCOMMERCE_URL}/contact/", "Contact Support", secondary=True)
        ),
        icon_path=CROSS_ICON,
        gradient=("#f093fb", "#f5576c"),
        icon_color="#ff5252",
        button_color="#f5576c",
    )
    return HTMLResponse(content=html)
