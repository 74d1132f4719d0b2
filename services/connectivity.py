import asyncio
import logging

logger = logging.getLogger(__name__)


class ConnectivityGate:
    """
    Network reachability check consulted before every identification request.

    Reachability is a TCP connect to a well-known endpoint (a public DNS
    resolver by default). Any socket error or timeout counts as offline.
    """

    def __init__(self, host: str = "8.8.8.8", port: int = 53, timeout: float = 3.0):
        self.host = host
        self.port = port
        self.timeout = timeout

    async def check_connected(self) -> bool:
        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=self.timeout,
            )
        except (OSError, asyncio.TimeoutError) as e:
            logger.info("Connectivity probe to %s:%s failed: %s", self.host, self.port, e)
            return False

        writer.close()
        try:
            await writer.wait_closed()
        except OSError:
            pass
        return True
