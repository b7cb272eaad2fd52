from dataclasses import dataclass, field
from typing import Any, Iterable

from ..models import Order
from ..utils.constants import FALLBACK_PRODUCT_NAME
from .storage import MemoryStorage


@dataclass
class OrderKeys:
    order: Order
    keys: list[str]


@dataclass
class ProductGroup:
    name: str
    entries: list[OrderKeys] = field(default_factory=list)

    @property
    def key_count(self) -> int:
        return sum(len(entry.keys) for entry in self.entries)

    @property
    def keys(self) -> list[str]:
        return [key for entry in self.entries for key in entry.keys]


@dataclass
class OrderSummary:
    groups: dict[str, ProductGroup]
    total_keys: int
    total_amount: int
    order_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "orderCount": self.order_count,
            "totalKeys": self.total_keys,
            "totalAmount": self.total_amount,
            "products": [
                {
                    "name": group.name,
                    "keyCount": group.key_count,
                    "keys": group.keys,
                    "orders": [
                        {"order": entry.order.to_dict(), "keys": entry.keys}
                        for entry in group.entries
                    ],
                }
                for group in self.groups.values()
            ],
        }


def summarize_orders(orders: Iterable[Order], storage: MemoryStorage) -> OrderSummary:
    """Group a customer's orders by product name and flatten their keys.

    Orders for the same product placed in separate checkouts end up in one
    group, so the caller can show every key ever bought for that product.
    """
    orders = list(orders)
    groups: dict[str, ProductGroup] = {}
    total_keys = 0

    for order in orders:
        product = storage.get_product(order.product_id)
        name = product.name if product is not None else FALLBACK_PRODUCT_NAME
        keys = order.keys
        groups.setdefault(name, ProductGroup(name=name)).entries.append(OrderKeys(order=order, keys=keys))
        total_keys += len(keys)

    if len(orders) > 1:
        total_amount = sum(order.amount for order in orders)
    elif orders:
        total_amount = orders[0].amount
    else:
        total_amount = 0

    return OrderSummary(
        groups=groups,
        total_keys=total_keys,
        total_amount=total_amount,
        order_count=len(orders),
    )
