import base64

import pytest
from aiohttp import web

from apikeystore.services.paypal import PayPalError, PayPalNotConfiguredError, PayPalService


@pytest.fixture
async def fake_paypal(aiohttp_server, monkeypatch):
    calls = []
    flaky = {"remaining": 1}

    async def oauth_token(request):
        form = await request.post()
        calls.append(("token", request.headers.get("Authorization"), form.get("grant_type")))
        return web.json_response({"access_token": "A21AA-token", "expires_in": 32400})

    async def generate_token(request):
        calls.append(("client-token", request.headers.get("Authorization")))
        return web.json_response({"client_token": "ct-123"})

    async def create_order(request):
        body = await request.json()
        calls.append(("create", body, request.headers.get("Prefer")))
        return web.json_response({"id": "5O190127TN364715T", "status": "CREATED"}, status=201)

    async def capture_order(request):
        order_id = request.match_info["order_id"]
        calls.append(("capture", order_id))
        if order_id == "DECLINED":
            return web.json_response({"name": "UNPROCESSABLE_ENTITY"}, status=422)
        if order_id == "HTML":
            return web.Response(text="<html>gateway error</html>", status=200)
        if order_id == "FLAKY" and flaky["remaining"] > 0:
            flaky["remaining"] -= 1
            return web.json_response({}, status=503, headers={"Retry-After": "0"})
        return web.json_response({"id": order_id, "status": "COMPLETED"}, status=201)

    app = web.Application()
    app.router.add_post("/v1/oauth2/token", oauth_token)
    app.router.add_post("/v1/identity/generate-token", generate_token)
    app.router.add_post("/v2/checkout/orders", create_order)
    app.router.add_post("/v2/checkout/orders/{order_id}/capture", capture_order)
    server = await aiohttp_server(app)

    monkeypatch.setenv("PAYPAL_CLIENT_ID", "client-id")
    monkeypatch.setenv("PAYPAL_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("PAYPAL_API_BASE_URL", f"http://{server.host}:{server.port}")
    return calls


async def test_not_configured_raises():
    service = PayPalService()
    assert service.enabled is False
    with pytest.raises(PayPalNotConfiguredError):
        await service.get_client_token()


def test_environment_selects_base_url(monkeypatch):
    assert PayPalService().base_url == PayPalService.SANDBOX_URL
    monkeypatch.setenv("PAYPAL_ENVIRONMENT", "production")
    assert PayPalService().base_url == PayPalService.PRODUCTION_URL


async def test_client_token_uses_cached_oauth_token(fake_paypal):
    service = PayPalService()

    assert await service.get_client_token() == "ct-123"
    assert await service.get_client_token() == "ct-123"

    token_calls = [call for call in fake_paypal if call[0] == "token"]
    assert len(token_calls) == 1
    expected = "Basic " + base64.b64encode(b"client-id:client-secret").decode()
    assert token_calls[0][1] == expected
    assert token_calls[0][2] == "client_credentials"
    assert ("client-token", "Bearer A21AA-token") in fake_paypal


async def test_create_order_sends_purchase_unit(fake_paypal):
    status, body = await PayPalService().create_order("99.00", "USD", "CAPTURE")

    assert status == 201
    assert body["id"] == "5O190127TN364715T"
    _, sent, prefer = next(call for call in fake_paypal if call[0] == "create")
    assert sent == {
        "intent": "CAPTURE",
        "purchase_units": [{"amount": {"currency_code": "USD", "value": "99.00"}}],
    }
    assert prefer == "return=minimal"


async def test_capture_retries_unavailable_upstream(fake_paypal):
    status, body = await PayPalService().capture_order("FLAKY")

    assert status == 201
    assert body["status"] == "COMPLETED"
    assert [call for call in fake_paypal if call[0] == "capture"] == [("capture", "FLAKY"), ("capture", "FLAKY")]


async def test_non_json_response_is_an_error(fake_paypal):
    with pytest.raises(PayPalError):
        await PayPalService().capture_order("HTML")


async def test_unreachable_paypal_is_an_error(monkeypatch):
    monkeypatch.setenv("PAYPAL_CLIENT_ID", "client-id")
    monkeypatch.setenv("PAYPAL_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("PAYPAL_API_BASE_URL", "http://127.0.0.1:1")

    with pytest.raises(PayPalError):
        await PayPalService().create_order("10.00", "USD", "CAPTURE")


async def test_paypal_routes_relay_upstream_responses(fake_paypal, make_client):
    client = await make_client()

    resp = await client.get("/api/paypal/setup")
    assert (await resp.json())["clientToken"] == "ct-123"

    resp = await client.post("/api/paypal/order", json={"amount": "79.00", "currency": "USD", "intent": "CAPTURE"})
    assert resp.status == 201
    assert (await resp.json())["id"] == "5O190127TN364715T"

    resp = await client.post("/api/paypal/order/5O190127TN364715T/capture")
    assert resp.status == 201
    assert (await resp.json())["status"] == "COMPLETED"

    resp = await client.post("/api/paypal/order/DECLINED/capture")
    assert resp.status == 422

    resp = await client.post("/api/paypal/order/HTML/capture")
    assert resp.status == 500
    assert (await resp.json())["message"] == "failed to capture order"


async def test_paypal_order_validation(fake_paypal, make_client):
    client = await make_client()

    resp = await client.post("/api/paypal/order", json={"amount": "-5", "currency": "USD", "intent": "CAPTURE"})
    assert resp.status == 400
    assert (await resp.json())["message"] == "invalid amount"

    resp = await client.post("/api/paypal/order", json={"amount": "5", "intent": "CAPTURE"})
    assert resp.status == 400
    assert (await resp.json())["message"] == "invalid currency"
