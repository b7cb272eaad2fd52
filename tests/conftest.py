import pytest

from apikeystore.services.paypal import PayPalService
from apikeystore.services.storage import MemoryStorage
from apikeystore.services.web_server import StorefrontServer

from .helpers import RecordingNotifier

ENV_VARS = (
    "PAYPAL_CLIENT_ID",
    "PAYPAL_CLIENT_SECRET",
    "PAYPAL_API_BASE_URL",
    "PAYPAL_ENVIRONMENT",
    "PAYPAL_MAX_RETRIES",
    "DISCORD_ORDER_WEBHOOK_URL",
    "DISCORD_WEBHOOK_TIMEOUT_SECONDS",
    "STORE_ADMIN_API_KEY",
    "STORE_ADMIN_API_KEY_HEADER",
    "FRONTEND_ORIGINS",
    "FRONTEND_ORIGIN",
    "SOLANA_WALLET_ADDRESS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_client(aiohttp_client, storage, notifier):
    async def factory():
        server = StorefrontServer(storage, PayPalService(), notifier)
        return await aiohttp_client(server.app)

    return factory


@pytest.fixture
async def client(make_client):
    return await make_client()
