import asyncio

import discord

from apikeystore.models import PaymentStatus
from apikeystore.services.notifier import OrderNotifier
from apikeystore.utils.constants import Colors
from apikeystore.utils.logger import logger

from .helpers import WEBHOOK_URL, order_request


def embed_fields(embed):
    return {field.name: field.value for field in embed.fields}


def test_embed_describes_order(storage):
    order = storage.create_order(order_request(quantity=3, amount=29700, transactionLink="https://solscan.io/tx/1"))

    embed = OrderNotifier().build_embed(order, "Google API Key")
    fields = embed_fields(embed)

    assert embed.title == "New API Key Order"
    assert embed.color.value == Colors.PENDING
    assert fields["Order ID"] == f"`{order.id}`"
    assert fields["Product"] == "Google API Key"
    assert fields["Total"] == "$297.00 USD"
    assert fields["Payment"] == "Solana (SOL)"
    assert fields["Keys"] == "3"
    assert fields["Transaction"] == "https://solscan.io/tx/1"
    assert all(key not in str(fields) for key in order.keys)


def test_completed_orders_use_success_color(storage):
    order = storage.create_order(order_request(paymentMethod="paypal"))

    embed = OrderNotifier().build_embed(order)

    assert order.payment_status is PaymentStatus.COMPLETED
    assert embed.color.value == Colors.SUCCESS
    assert embed_fields(embed)["Product"] == "google"
    assert "Transaction" not in embed_fields(embed)


async def test_send_without_webhook_is_skipped(storage):
    notifier = OrderNotifier()
    order = storage.create_order(order_request())

    assert notifier.enabled is False
    assert await notifier.send_order(order) is False


async def test_send_with_invalid_webhook_url_fails_softly(monkeypatch, storage):
    monkeypatch.setenv("DISCORD_ORDER_WEBHOOK_URL", "https://example.com/not-a-webhook")
    notifier = OrderNotifier()
    order = storage.create_order(order_request())

    assert notifier.enabled is True
    assert await notifier.send_order(order) is False


async def test_send_times_out_softly(monkeypatch, storage):
    sessions = []

    async def timed_out(self, *args, **kwargs):
        sessions.append(self.session)
        raise asyncio.TimeoutError

    monkeypatch.setenv("DISCORD_ORDER_WEBHOOK_URL", WEBHOOK_URL)
    monkeypatch.setenv("DISCORD_WEBHOOK_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setattr(discord.Webhook, "send", timed_out)
    notifier = OrderNotifier()
    order = storage.create_order(order_request())

    assert await notifier.send_order(order) is False
    assert sessions[0].timeout.total == 2.5


def test_timeout_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("DISCORD_WEBHOOK_TIMEOUT_SECONDS", "soon")
    assert OrderNotifier().timeout_seconds == 10.0


async def test_missing_webhook_is_reported_once(monkeypatch, storage):
    warnings = []
    monkeypatch.setattr(logger, "warning", lambda message, *args: warnings.append(message))
    notifier = OrderNotifier()
    order = storage.create_order(order_request())

    for _ in range(3):
        assert await notifier.send_order(order) is False

    assert len(warnings) == 1
    assert "DISCORD_ORDER_WEBHOOK_URL" in warnings[0]
