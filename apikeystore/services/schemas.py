from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, ValidationError, field_validator

from ..models import PaymentMethod, PaymentStatus
from ..utils.keygen import MAX_KEYS_PER_ORDER


class CreateOrderRequest(BaseModel):
    """One checkout line. ``quantity`` is the number of keys to issue."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)

    product_id: str = Field(alias="productId", min_length=1)
    customer_email: EmailStr = Field(alias="customerEmail")
    customer_name: str = Field(alias="customerName", min_length=1)
    payment_method: PaymentMethod = Field(alias="paymentMethod")
    amount: int = Field(ge=0)
    currency: str = "USD"
    transaction_link: Optional[str] = Field(default=None, alias="transactionLink")
    quantity: int = Field(default=1, le=MAX_KEYS_PER_ORDER)

    @field_validator("currency", mode="before")
    @classmethod
    def _default_currency(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "USD"
        return value

    @field_validator("transaction_link", mode="before")
    @classmethod
    def _blank_link_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, value: Any) -> Any:
        if value is None:
            return 1
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value <= 0:
            return 1
        return value

    @field_validator("quantity")
    @classmethod
    def _positive_quantity(cls, value: int) -> int:
        return value if value > 0 else 1


class UpdateStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: PaymentStatus
    api_key: Optional[str] = Field(default=None, alias="apiKey")


class PayPalOrderRequest(BaseModel):
    amount: str
    currency: str = Field(min_length=1)
    intent: str = Field(min_length=1)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("amount")
    @classmethod
    def _positive_amount(cls, value: str) -> str:
        try:
            number = float(value)
        except ValueError:
            raise ValueError("amount must be a positive number") from None
        if not number > 0:
            raise ValueError("amount must be a positive number")
        return value


_order_lines = TypeAdapter(list[CreateOrderRequest])


def parse_order_payload(payload: Union[dict[str, Any], list[Any]]) -> list[CreateOrderRequest]:
    """Validate a checkout body: a single order object or one object per cart line."""
    if isinstance(payload, list):
        return _order_lines.validate_python(payload)
    return [CreateOrderRequest.model_validate(payload)]


def describe_errors(exc: ValidationError) -> list[dict[str, str]]:
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())),
            "message": str(error.get("msg", "invalid value")),
        }
        for error in exc.errors()
    ]
