import asyncio
import logging
import signal
import sys

from http_server.server import HTTPServer
from kvs.config import Settings
from kvs.engine import LMDBStorage
from kvs.handler import KVSHandler
from kvs.models import InitializationError

logger = logging.getLogger()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


async def run(settings: Settings, storage: LMDBStorage) -> None:
    server = HTTPServer(KVSHandler(storage), host=settings.host, port=settings.port)
    await server.listen()

    serve_task = asyncio.create_task(server.start())

    def on_signal(signum: int) -> None:
        logger.info("signal received. exiting.")
        serve_task.cancel()

    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, on_signal, signum)

    try:
        await serve_task
    finally:
        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(signum)


def main() -> int:
    settings = Settings.from_env()
    configure_logging(settings)

    try:
        storage = LMDBStorage.open(map_size=settings.map_size)
    except InitializationError as e:
        logger.critical(f"{e}")
        return 1

    try:
        asyncio.run(run(settings, storage))
    except KeyboardInterrupt:
        pass
    finally:
        # The server has stopped accepting requests by now
        storage.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
