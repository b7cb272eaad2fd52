import threading
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from ..catalog import DEFAULT_PRODUCTS
from ..models import (
    Order,
    PaymentMethod,
    PaymentStatus,
    Product,
    User,
    credentials_for,
    decode_credentials,
)
from ..utils.keygen import generate_api_key
from ..utils.logger import logger
from .schemas import CreateOrderRequest


class MemoryStorage:
    """In-memory store for products, orders and users.

    One instance is created per process by the application factory and
    closed on shutdown. Every collection access goes through ``self._lock``.
    Lookups return ``None`` for unknown ids instead of raising.
    """

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._lock = threading.RLock()
        self._users: dict[str, User] = {}
        self._orders: dict[str, Order] = {}
        self._products: dict[str, Product] = {}
        for product in DEFAULT_PRODUCTS if products is None else products:
            self._products[product.id] = product
        self.closed = False

    def close(self) -> None:
        with self._lock:
            self._users.clear()
            self._orders.clear()
            self._products.clear()
            self.closed = True
        logger.info("Order storage closed.")

    # Users

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return user
        return None

    def create_user(self, username: str, password: str) -> User:
        user = User(id=str(uuid.uuid4()), username=username, password=password, email=None)
        with self._lock:
            self._users[user.id] = user
        return user

    # Orders

    def get_order(self, order_id: str) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)

    def create_order(self, request: CreateOrderRequest) -> Order:
        quantity = request.quantity if request.quantity and request.quantity > 0 else 1

        # Keys are issued at creation time, pending orders included.
        keys = [generate_api_key() for _ in range(quantity)]
        credentials = credentials_for(keys)
        encoding = "single string" if quantity == 1 else "JSON array"
        logger.info(f"Issuing {len(keys)} API key(s) for product={request.product_id} stored as {encoding}")

        payment_method = PaymentMethod(request.payment_method)
        status = PaymentStatus.COMPLETED if payment_method is PaymentMethod.PAYPAL else PaymentStatus.PENDING

        order = Order(
            id=str(uuid.uuid4()),
            product_id=request.product_id,
            customer_email=str(request.customer_email),
            customer_name=request.customer_name,
            payment_method=payment_method,
            payment_status=status,
            amount=request.amount,
            currency=request.currency or "USD",
            transaction_link=request.transaction_link or None,
            credentials=credentials,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._orders[order.id] = order
        return order

    def update_order_status(
        self,
        order_id: str,
        status: PaymentStatus,
        api_key: Optional[str] = None,
    ) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return None
            order.payment_status = PaymentStatus(status)
            if api_key:
                order.credentials = decode_credentials(api_key)
            return order

    def get_orders_by_email(self, email: str) -> list[Order]:
        with self._lock:
            return [order for order in self._orders.values() if order.customer_email == email]

    def count_orders(self) -> int:
        with self._lock:
            return len(self._orders)

    # Products

    def get_products(self) -> list[Product]:
        with self._lock:
            return list(self._products.values())

    def get_product(self, product_id: str) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)
