from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator

OrderStatus = Literal["processing", "failed"]

def to_minor_units(amount: Decimal) -> int:
    """Amount in minor units, rounded half-up (19.99 -> 1999)."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

class CheckoutRequest(BaseModel):
    order_id: Union[str, int]
    amount: Decimal
    currency: Optional[str] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None

    @field_validator("order_id", mode="before")
    @classmethod
    def order_id_not_blank(cls, v):
        if isinstance(v, bool):
            raise ValueError("order_id must be a string or number")
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("order_id must not be empty")
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def amount_is_decimal(cls, v):
        if isinstance(v, bool):
            raise ValueError("amount must be a number")
        try:
            # Floats go through str() so 19.99 stays 19.99 rather than its binary expansion
            value = Decimal(str(v).strip())
        except InvalidOperation:
            raise ValueError("amount must be a number")
        if not value.is_finite() or value <= 0:
            raise ValueError("amount must be greater than zero")
        try:
            minor_units = to_minor_units(value)
        except InvalidOperation:
            raise ValueError("amount is too large")
        if minor_units < 1:
            raise ValueError("amount must be at least one minor unit")
        return value

    @field_validator("currency")
    @classmethod
    def currency_code(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().lower()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("currency must be a three-letter code")
        return v

    @property
    def order_ref(self) -> str:
        return str(self.order_id)

    @property
    def unit_amount(self) -> int:
        return to_minor_units(self.amount)

class MetaDataEntry(BaseModel):
    key: str
    value: str

class OrderUpdate(BaseModel):
    status: OrderStatus
    meta_data: List[MetaDataEntry] = Field(default_factory=list)
    transaction_id: Optional[str] = None

    @classmethod
    def for_payment(cls, status: OrderStatus, transaction_id: Optional[str] = None) -> "OrderUpdate":
        update = cls(
            status=status,
            meta_data=[MetaDataEntry(key="_stripe_payment_status", value=status)],
        )
        if transaction_id:
            update.transaction_id = transaction_id
            update.meta_data.append(MetaDataEntry(key="_stripe_payment_intent", value=transaction_id))
        return update
