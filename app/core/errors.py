from typing import Optional


class CheckoutRelayError(Exception):
    """Base class for errors that map onto a client-facing HTTP response."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.public_message
        super().__init__(self.message)


class ValidationError(CheckoutRelayError):
    """A required checkout field is missing or malformed."""

    status_code = 400
    public_message = "Invalid checkout request"


class ConfigError(CheckoutRelayError):
    """A credential needed for an outbound call is not configured.

    The message passed in is the detailed cause and is only logged; callers
    receive ``public_message``.
    """

    status_code = 500
    public_message = "Payment gateway not configured. Please contact support."


class UpstreamError(CheckoutRelayError):
    """The payment processor rejected or failed the session request."""

    status_code = 500
    public_message = "Failed to create payment session"


class BadPayload(CheckoutRelayError):
    """A webhook body could not be parsed or authenticated."""

    status_code = 400
    public_message = "Invalid webhook payload"
