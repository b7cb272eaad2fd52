import asyncio
import json
import os
import time
from typing import Any, Dict, Optional, Tuple

import aiohttp

from ..utils.logger import logger


class PayPalError(Exception):
    """A PayPal call failed or returned something unusable."""


class PayPalNotConfiguredError(PayPalError):
    """PAYPAL_CLIENT_ID / PAYPAL_CLIENT_SECRET are missing."""


class PayPalService:
    SANDBOX_URL = "https://api-m.sandbox.paypal.com"
    PRODUCTION_URL = "https://api-m.paypal.com"

    def __init__(self):
        self.client_id = ""
        self.client_secret = ""
        self.base_url = self.SANDBOX_URL
        self.timeout_seconds = 15.0
        self.max_retries = 1
        self._access_token = ""
        self._token_expires_at = 0.0
        self._refresh_config()

    def _refresh_config(self) -> None:
        self.client_id = (os.getenv("PAYPAL_CLIENT_ID") or "").strip()
        self.client_secret = (os.getenv("PAYPAL_CLIENT_SECRET") or "").strip()

        environment = (os.getenv("PAYPAL_ENVIRONMENT") or "sandbox").strip().lower()
        default_url = self.PRODUCTION_URL if environment in {"production", "live"} else self.SANDBOX_URL
        self.base_url = ((os.getenv("PAYPAL_API_BASE_URL") or "").strip() or default_url).rstrip("/")
        self.timeout_seconds = self._to_float(os.getenv("PAYPAL_TIMEOUT_SECONDS"), default=15.0)
        self.max_retries = self._to_int(os.getenv("PAYPAL_MAX_RETRIES"), default=1)

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _require_credentials(self) -> None:
        if not self.enabled:
            raise PayPalNotConfiguredError(
                "PayPal not configured. Please add PAYPAL_CLIENT_ID and PAYPAL_CLIENT_SECRET."
            )

    async def get_client_token(self) -> str:
        status, payload = await self._request("POST", "/v1/identity/generate-token")
        token = payload.get("client_token") if isinstance(payload, dict) else None
        if status >= 300 or not token:
            logger.error(f"PayPal client token request failed ({status}): {payload}")
            raise PayPalError("failed to fetch PayPal client token")
        return str(token)

    async def create_order(self, amount: str, currency: str, intent: str) -> Tuple[int, Any]:
        body = {
            "intent": intent,
            "purchase_units": [
                {
                    "amount": {
                        "currency_code": currency,
                        "value": amount,
                    }
                }
            ],
        }
        return await self._request(
            "POST",
            "/v2/checkout/orders",
            data=body,
            extra_headers={"Prefer": "return=minimal"},
        )

    async def capture_order(self, paypal_order_id: str) -> Tuple[int, Any]:
        return await self._request(
            "POST",
            f"/v2/checkout/orders/{paypal_order_id}/capture",
            extra_headers={"Prefer": "return=minimal"},
        )

    async def _get_access_token(self, session: aiohttp.ClientSession) -> str:
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        auth = aiohttp.BasicAuth(self.client_id, self.client_secret)
        async with session.post(
            f"{self.base_url}/v1/oauth2/token",
            data={"grant_type": "client_credentials"},
            auth=auth,
        ) as response:
            try:
                payload = await response.json(content_type=None)
            except (json.JSONDecodeError, aiohttp.ContentTypeError):
                payload = {}
            if response.status >= 300 or not isinstance(payload, dict) or not payload.get("access_token"):
                logger.error(f"PayPal OAuth token request failed ({response.status}): {payload}")
                raise PayPalError("failed to authenticate with PayPal")

        self._access_token = str(payload["access_token"])
        expires_in = self._to_float(payload.get("expires_in"), default=300.0)
        # Renew a minute early so a token never expires mid-request.
        self._token_expires_at = time.monotonic() + max(0.0, expires_in - 60.0)
        return self._access_token

    async def _request(
        self,
        method: str,
        path: str,
        data: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Tuple[int, Any]:
        self._refresh_config()
        self._require_credentials()

        url = f"{self.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                token = await self._get_access_token(session)
                headers = {
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {token}",
                }
                if extra_headers:
                    headers.update(extra_headers)

                kwargs: Dict[str, Any] = {"headers": headers}
                if data is not None:
                    kwargs["json"] = data

                retries = max(0, self.max_retries)
                for attempt in range(retries + 1):
                    async with session.request(method.upper(), url, **kwargs) as response:
                        body = await response.text()

                        if response.status in (429, 502, 503, 504) and attempt < retries:
                            retry_after = self._to_float(response.headers.get("Retry-After"), default=0.5)
                            await asyncio.sleep(min(max(retry_after, 0.2), 5.0))
                            continue

                        if response.status == 401:
                            self._access_token = ""

                        if response.status >= 300:
                            logger.error(f"PayPal API error {response.status} at {url}: {body[:300]}")

                        if not body:
                            return response.status, {}
                        try:
                            return response.status, json.loads(body)
                        except json.JSONDecodeError:
                            raise PayPalError(f"PayPal returned a non-JSON response from {path}") from None
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.error(f"PayPal request failed ({method} {url}): {exc}")
            raise PayPalError(f"PayPal request failed: {exc}") from exc

        raise PayPalError(f"PayPal request to {path} exhausted its retries")

    @staticmethod
    def _to_int(value: Any, default: int) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    @staticmethod
    def _to_float(value: Any, default: float) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default
