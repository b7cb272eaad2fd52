import fnmatch
import hmac
import os
from typing import Any, Optional, Union

from aiohttp import web
from pydantic import ValidationError

from ..models import CRYPTO_METHODS, Order, PaymentMethod
from ..utils.constants import DEFAULT_WALLET_ADDRESSES, PAYMENT_METHOD_LABELS
from ..utils.logger import logger
from .aggregator import summarize_orders
from .notifier import OrderNotifier
from .paypal import PayPalError, PayPalNotConfiguredError, PayPalService
from .schemas import PayPalOrderRequest, UpdateStatusRequest, describe_errors, parse_order_payload
from .storage import MemoryStorage


class StorefrontServer:
    def __init__(
        self,
        storage: MemoryStorage,
        paypal: Optional[PayPalService] = None,
        notifier: Optional[OrderNotifier] = None,
    ):
        self.storage = storage
        self.paypal = paypal or PayPalService()
        self.notifier = notifier or OrderNotifier()
        self.host = os.getenv("STORE_API_HOST", "0.0.0.0")
        port_value = os.getenv("PORT") or os.getenv("STORE_API_PORT") or "8080"
        self.port = int(port_value)
        self.api_key = (os.getenv("STORE_ADMIN_API_KEY") or "").strip()
        self.api_key_header = (os.getenv("STORE_ADMIN_API_KEY_HEADER") or "x-api-key").strip().lower()
        raw_origins = (os.getenv("FRONTEND_ORIGINS") or os.getenv("FRONTEND_ORIGIN") or "http://localhost:3000").strip()
        self.allowed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
        if not self.allowed_origins:
            self.allowed_origins = ["http://localhost:3000"]
        self.wallet_addresses = {
            method: (os.getenv(f"{method.upper()}_WALLET_ADDRESS") or default).strip()
            for method, default in DEFAULT_WALLET_ADDRESSES.items()
        }

        self.app = web.Application(
            middlewares=[
                self._error_middleware,
                self._cors_middleware,
                self._auth_middleware,
            ]
        )
        self.app.on_cleanup.append(self._on_cleanup)
        self.app.router.add_route("OPTIONS", "/{tail:.*}", self._handle_options)
        self.app.router.add_get("/api/health", self.health)
        self.app.router.add_get("/api/products", self.list_products)
        self.app.router.add_get("/api/products/{product_id}", self.get_product)
        self.app.router.add_get("/api/payment-methods", self.payment_methods)
        self.app.router.add_post("/api/orders", self.create_orders)
        # Literal paths first so they are not captured by {order_id}.
        self.app.router.add_get("/api/orders/email", self.orders_by_email)
        self.app.router.add_get("/api/orders/summary", self.orders_summary)
        self.app.router.add_get("/api/orders/{order_id}", self.get_order)
        self.app.router.add_patch("/api/orders/{order_id}/status", self.update_order_status)
        self.app.router.add_get("/api/paypal/setup", self.paypal_setup)
        self.app.router.add_post("/api/paypal/order", self.paypal_create_order)
        self.app.router.add_post("/api/paypal/order/{paypal_order_id}/capture", self.paypal_capture_order)

        self.runner: Optional[web.AppRunner] = None

    @web.middleware
    async def _error_middleware(self, request: web.Request, handler):
        try:
            return await handler(request)
        except web.HTTPException:
            raise
        except Exception as exc:
            logger.exception(f"Storefront API error on {request.path}: {exc}")
            return web.json_response(
                {"ok": False, "message": "internal server error"},
                status=500,
            )

    @web.middleware
    async def _cors_middleware(self, request: web.Request, handler):
        response = await handler(request)
        self._apply_cors_headers(request, response)
        return response

    @web.middleware
    async def _auth_middleware(self, request: web.Request, handler):
        # Only the status endpoint mutates existing orders; everything else is storefront-facing.
        if request.method != "PATCH" or not self.api_key:
            return await handler(request)

        received_key = request.headers.get(self.api_key_header, "").strip()
        auth_header = request.headers.get("authorization", "").strip()
        if not received_key and auth_header.lower().startswith("bearer "):
            received_key = auth_header[7:].strip()

        if not received_key or not hmac.compare_digest(received_key, self.api_key):
            logger.warning(f"Rejected unauthorized {request.method} {request.path}")
            return web.json_response(
                {"ok": False, "message": "unauthorized"},
                status=401,
            )

        return await handler(request)

    async def _handle_options(self, request: web.Request):
        return web.Response(status=204)

    def _apply_cors_headers(self, request: web.Request, response: web.StreamResponse) -> None:
        origin = request.headers.get("Origin")

        if "*" in self.allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = "*"
        elif origin and self._is_origin_allowed(origin):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
        else:
            response.headers["Access-Control-Allow-Origin"] = self.allowed_origins[0]

        response.headers["Access-Control-Allow-Methods"] = "GET,POST,PATCH,OPTIONS"
        request_headers = request.headers.get("Access-Control-Request-Headers")
        default_headers = f"Content-Type,Authorization,{self.api_key_header}"
        response.headers["Access-Control-Allow-Headers"] = request_headers or default_headers

    def _is_origin_allowed(self, origin: str) -> bool:
        for allowed in self.allowed_origins:
            if allowed == origin:
                return True
            if "*" in allowed and fnmatch.fnmatch(origin, allowed):
                return True
        return False

    async def start(self) -> None:
        if self.runner is not None:
            return

        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()

        logger.info(
            f"Storefront API listening on {self.host}:{self.port} "
            f"(paypal: {'on' if self.paypal.enabled else 'off'}, "
            f"order webhook: {'on' if self.notifier.enabled else 'off'})"
        )

    async def stop(self) -> None:
        if self.runner is None:
            return

        await self.runner.cleanup()
        self.runner = None
        logger.info("Storefront API stopped.")

    async def _on_cleanup(self, app: web.Application) -> None:
        self.storage.close()

    async def health(self, request: web.Request):
        return web.json_response(
            {
                "ok": True,
                "products": len(self.storage.get_products()),
                "orders": self.storage.count_orders(),
                "paypalEnabled": self.paypal.enabled,
                "orderWebhookConfigured": self.notifier.enabled,
                "allowed_origins": self.allowed_origins,
            }
        )

    async def list_products(self, request: web.Request):
        products = [product.to_dict() for product in self.storage.get_products()]
        return web.json_response({"ok": True, "products": products})

    async def get_product(self, request: web.Request):
        product_id = str(request.match_info.get("product_id", "")).strip()
        product = self.storage.get_product(product_id)
        if product is None:
            return web.json_response({"ok": False, "message": "product not found"}, status=404)
        return web.json_response({"ok": True, "product": product.to_dict()})

    async def payment_methods(self, request: web.Request):
        methods: list[dict[str, Any]] = []
        for method in PaymentMethod:
            if method is PaymentMethod.PAYPAL:
                kind, enabled = "paypal", self.paypal.enabled
            elif method in CRYPTO_METHODS:
                kind, enabled = "crypto", bool(self.wallet_addresses.get(method.value))
            else:
                # Bank transfer is listed but not accepted.
                kind, enabled = "bank", False
            entry: dict[str, Any] = {
                "id": method.value,
                "label": PAYMENT_METHOD_LABELS[method.value],
                "type": kind,
                "enabled": enabled,
                "requiresTransactionLink": kind == "crypto",
            }
            if kind == "crypto":
                entry["walletAddress"] = self.wallet_addresses.get(method.value, "")
            methods.append(entry)
        return web.json_response({"ok": True, "methods": methods})

    async def create_orders(self, request: web.Request):
        payload = await self._safe_json(request)
        if payload is None:
            return web.json_response({"ok": False, "message": "invalid json body"}, status=400)
        if isinstance(payload, list) and not payload:
            return web.json_response({"ok": False, "message": "order items are required"}, status=400)

        try:
            order_requests = parse_order_payload(payload)
        except ValidationError as exc:
            logger.warning(f"Rejected order payload: {exc.error_count()} validation error(s)")
            return web.json_response(
                {"ok": False, "message": "invalid order data", "errors": describe_errors(exc)},
                status=400,
            )

        orders = [self.storage.create_order(order_request) for order_request in order_requests]
        for order in orders:
            logger.info(
                f"Order {order.id} created: product={order.product_id} method={order.payment_method.value} "
                f"status={order.payment_status.value} keys={len(order.keys)}"
            )
            await self._send_order_log(order)

        return web.json_response(
            {
                "ok": True,
                "orderId": orders[0].id,
                "order": orders[0].to_dict(),
                "orders": [order.to_dict() for order in orders],
            },
            status=201,
        )

    async def get_order(self, request: web.Request):
        order_id = str(request.match_info.get("order_id", "")).strip()
        order = self.storage.get_order(order_id)
        if order is None:
            return web.json_response({"ok": False, "message": "order not found"}, status=404)
        return web.json_response({"ok": True, "order": order.to_dict()})

    async def update_order_status(self, request: web.Request):
        order_id = str(request.match_info.get("order_id", "")).strip()
        payload = await self._safe_json(request)
        if not isinstance(payload, dict):
            return web.json_response({"ok": False, "message": "invalid json body"}, status=400)

        try:
            update = UpdateStatusRequest.model_validate(payload)
        except ValidationError as exc:
            return web.json_response(
                {"ok": False, "message": "invalid status", "errors": describe_errors(exc)},
                status=400,
            )

        order = self.storage.update_order_status(order_id, update.status, update.api_key)
        if order is None:
            return web.json_response({"ok": False, "message": "order not found"}, status=404)

        logger.info(f"Order {order.id} status set to {order.payment_status.value}")
        return web.json_response({"ok": True, "order": order.to_dict()})

    async def orders_by_email(self, request: web.Request):
        email = str(request.query.get("email", "")).strip()
        if not email:
            return web.json_response({"ok": False, "message": "email parameter is required"}, status=400)

        orders = self.storage.get_orders_by_email(email)
        return web.json_response({"ok": True, "orders": [order.to_dict() for order in orders]})

    async def orders_summary(self, request: web.Request):
        email = str(request.query.get("email", "")).strip()
        if not email:
            return web.json_response({"ok": False, "message": "email parameter is required"}, status=400)

        summary = summarize_orders(self.storage.get_orders_by_email(email), self.storage)
        return web.json_response({"ok": True, "email": email, **summary.to_dict()})

    async def paypal_setup(self, request: web.Request):
        try:
            client_token = await self.paypal.get_client_token()
        except PayPalNotConfiguredError as exc:
            return web.json_response({"ok": False, "message": str(exc)}, status=503)
        except PayPalError as exc:
            logger.error(f"Failed to get PayPal client token: {exc}")
            return web.json_response({"ok": False, "message": "failed to initialize PayPal"}, status=500)
        return web.json_response({"ok": True, "clientToken": client_token})

    async def paypal_create_order(self, request: web.Request):
        if not self.paypal.enabled:
            return self._paypal_unavailable()

        payload = await self._safe_json(request)
        if not isinstance(payload, dict):
            return web.json_response({"ok": False, "message": "invalid json body"}, status=400)

        try:
            checkout = PayPalOrderRequest.model_validate(payload)
        except ValidationError as exc:
            errors = describe_errors(exc)
            return web.json_response(
                {"ok": False, "message": f"invalid {errors[0]['field']}", "errors": errors},
                status=400,
            )

        try:
            status, body = await self.paypal.create_order(checkout.amount, checkout.currency, checkout.intent)
        except PayPalNotConfiguredError:
            return self._paypal_unavailable()
        except PayPalError as exc:
            logger.error(f"Failed to create PayPal order: {exc}")
            return web.json_response({"ok": False, "message": "failed to create order"}, status=500)
        return web.json_response(body, status=status)

    async def paypal_capture_order(self, request: web.Request):
        if not self.paypal.enabled:
            return self._paypal_unavailable()

        paypal_order_id = str(request.match_info.get("paypal_order_id", "")).strip()
        try:
            status, body = await self.paypal.capture_order(paypal_order_id)
        except PayPalNotConfiguredError:
            return self._paypal_unavailable()
        except PayPalError as exc:
            logger.error(f"Failed to capture PayPal order {paypal_order_id}: {exc}")
            return web.json_response({"ok": False, "message": "failed to capture order"}, status=500)
        return web.json_response(body, status=status)

    def _paypal_unavailable(self) -> web.Response:
        return web.json_response(
            {
                "ok": False,
                "message": "PayPal not configured. Please add PAYPAL_CLIENT_ID and PAYPAL_CLIENT_SECRET.",
            },
            status=503,
        )

    async def _send_order_log(self, order: Order) -> bool:
        product = self.storage.get_product(order.product_id)
        return await self.notifier.send_order(order, product.name if product else None)

    async def _safe_json(self, request: web.Request) -> Optional[Union[dict[str, Any], list[Any]]]:
        try:
            body = await request.json()
        except ValueError:
            return None
        if not isinstance(body, (dict, list)):
            return None
        return body
