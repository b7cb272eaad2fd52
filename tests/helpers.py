import re

from apikeystore.services.notifier import OrderNotifier
from apikeystore.services.schemas import CreateOrderRequest

KEY_PATTERN = re.compile(r"^sk_live_[A-Za-z0-9]{32}$")
WEBHOOK_URL = "https://discord.com/api/webhooks/123456789012345678/" + "a" * 68


def order_request(**overrides) -> CreateOrderRequest:
    data = {
        "productId": "google",
        "customerEmail": "buyer@example.com",
        "customerName": "Ada Buyer",
        "paymentMethod": "solana",
        "amount": 9900,
    }
    data.update(overrides)
    return CreateOrderRequest.model_validate(data)


class RecordingNotifier(OrderNotifier):
    def __init__(self):
        super().__init__()
        self.sent = []

    @property
    def enabled(self) -> bool:
        return True

    async def send_order(self, order, product_name=None) -> bool:
        self.sent.append((order.id, product_name))
        return True
