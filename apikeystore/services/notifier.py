import asyncio
import os
from typing import Optional

import aiohttp
import discord

from ..models import Order, PaymentStatus
from ..utils.constants import Colors, PAYMENT_METHOD_LABELS
from ..utils.logger import logger


class OrderNotifier:
    """Posts new-order embeds to a Discord channel webhook."""

    def __init__(self):
        self.webhook_url = (os.getenv("DISCORD_ORDER_WEBHOOK_URL") or "").strip()
        self.username = (os.getenv("DISCORD_WEBHOOK_USERNAME") or "API Key Store").strip() or "API Key Store"
        self.timeout_seconds = self._to_float(os.getenv("DISCORD_WEBHOOK_TIMEOUT_SECONDS"), default=10.0)
        if not self.webhook_url:
            logger.warning("Order webhook is not configured. Set DISCORD_ORDER_WEBHOOK_URL.")

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def build_embed(self, order: Order, product_name: Optional[str] = None) -> discord.Embed:
        completed = order.payment_status is PaymentStatus.COMPLETED
        embed = discord.Embed(
            title="New API Key Order",
            color=Colors.SUCCESS if completed else Colors.PENDING,
            timestamp=order.created_at,
        )
        embed.add_field(name="Order ID", value=f"`{order.id}`", inline=False)
        embed.add_field(name="Product", value=product_name or order.product_id, inline=True)
        embed.add_field(name="Total", value=self._format_price(order.amount, order.currency), inline=True)
        embed.add_field(
            name="Payment",
            value=PAYMENT_METHOD_LABELS.get(order.payment_method.value, order.payment_method.value),
            inline=True,
        )
        embed.add_field(name="Status", value=order.payment_status.value, inline=True)
        embed.add_field(name="Keys", value=str(len(order.keys)), inline=True)
        embed.add_field(name="Customer", value=f"{order.customer_name} <{order.customer_email}>"[:1024], inline=False)
        if order.transaction_link:
            embed.add_field(name="Transaction", value=order.transaction_link[:1024], inline=False)
        return embed

    async def send_order(self, order: Order, product_name: Optional[str] = None) -> bool:
        if not self.webhook_url:
            return False

        embed = self.build_embed(order, product_name)
        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                webhook = discord.Webhook.from_url(self.webhook_url, session=session)
                await webhook.send(embed=embed, username=self.username)
        except (discord.HTTPException, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.error(f"Order notification failed for {order.id}: {exc!r}")
            return False
        return True

    @staticmethod
    def _to_float(value, default: float) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    @staticmethod
    def _format_price(amount_cents: int, currency: str) -> str:
        return f"${amount_cents / 100:.2f} {currency}"
