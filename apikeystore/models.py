import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union


class PaymentMethod(str, Enum):
    PAYPAL = "paypal"
    SOLANA = "solana"
    BITCOIN = "bitcoin"
    ETHEREUM = "ethereum"
    BNB = "bnb"
    BEP20 = "bep20"
    BANK_TRANSFER = "bank_transfer"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


CRYPTO_METHODS = (
    PaymentMethod.SOLANA,
    PaymentMethod.BITCOIN,
    PaymentMethod.ETHEREUM,
    PaymentMethod.BNB,
    PaymentMethod.BEP20,
)


@dataclass(frozen=True)
class SingleKey:
    value: str

    def keys(self) -> list[str]:
        return [self.value]

    def encode(self) -> str:
        return self.value


@dataclass(frozen=True)
class MultipleKeys:
    values: tuple[str, ...]
    # Text the keys were decoded from; written back unchanged.
    raw: Optional[str] = field(default=None, compare=False)

    def keys(self) -> list[str]:
        return list(self.values)

    def encode(self) -> str:
        if self.raw is not None:
            return self.raw
        # Compact separators keep the field byte-identical to JSON.stringify output.
        return json.dumps(list(self.values), separators=(",", ":"), ensure_ascii=False)


Credentials = Union[SingleKey, MultipleKeys]


def credentials_for(keys: list[str]) -> Credentials:
    """Wrap freshly issued keys: one key stays bare, several become a list."""
    if len(keys) == 1:
        return SingleKey(keys[0])
    return MultipleKeys(tuple(keys))


def decode_credentials(raw: Optional[str]) -> Optional[Credentials]:
    """Parse a stored ``apiKey`` field.

    Only a JSON *array* is treated as several keys. Any other text, including
    strings that happen to be valid JSON scalars such as ``"12345"`` or
    ``"true"``, is kept verbatim as a single key.
    """
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except ValueError:
        return SingleKey(raw)
    if isinstance(parsed, list):
        return MultipleKeys(
            tuple(item if isinstance(item, str) else json.dumps(item) for item in parsed),
            raw=raw,
        )
    return SingleKey(raw)


def keys_from_field(raw: Optional[str]) -> list[str]:
    credentials = decode_credentials(raw)
    if credentials is None:
        return []
    return credentials.keys()


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str
    price: int
    requests_per_month: int
    rate_limit: str
    features: tuple[str, ...]
    popular: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "requestsPerMonth": self.requests_per_month,
            "rateLimit": self.rate_limit,
            "features": list(self.features),
            "popular": self.popular,
        }


@dataclass
class Order:
    id: str
    product_id: str
    customer_email: str
    customer_name: str
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    amount: int
    currency: str = "USD"
    transaction_link: Optional[str] = None
    credentials: Optional[Credentials] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def api_key(self) -> Optional[str]:
        if self.credentials is None:
            return None
        return self.credentials.encode()

    @property
    def keys(self) -> list[str]:
        if self.credentials is None:
            return []
        return self.credentials.keys()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "productId": self.product_id,
            "customerEmail": self.customer_email,
            "customerName": self.customer_name,
            "paymentMethod": self.payment_method.value,
            "paymentStatus": self.payment_status.value,
            "transactionLink": self.transaction_link,
            "amount": self.amount,
            "currency": self.currency,
            "apiKey": self.api_key,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class User:
    id: str
    username: str
    password: str
    email: Optional[str] = None
