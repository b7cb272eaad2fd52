import asyncio
import signal
import sys

from dotenv import load_dotenv

from .services.notifier import OrderNotifier
from .services.paypal import PayPalService
from .services.storage import MemoryStorage
from .services.web_server import StorefrontServer
from .utils.logger import apply_log_level, logger


async def run() -> None:
    storage = MemoryStorage()
    logger.info(f"Order storage ready with {len(storage.get_products())} products.")

    server = StorefrontServer(storage, PayPalService(), OrderNotifier())
    try:
        await server.start()
    except OSError as exc:
        logger.critical(f"Storefront API failed to start: {exc}")
        storage.close()
        sys.exit(1)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows event loops have no signal handler support.
            pass

    try:
        await stop_event.wait()
    finally:
        await server.stop()


def main() -> None:
    load_dotenv()
    apply_log_level(logger)
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Shutdown requested.")


if __name__ == "__main__":
    main()
