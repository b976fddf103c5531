# HTTP Helper for bridge connections
# Session configuration for local bridges (plain HTTP) and the discovery directory (HTTPS)

import aiohttp
import ssl
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def create_bridge_session(timeout_seconds: float = 4) -> aiohttp.ClientSession:
    """
    Create aiohttp session for a single pairing attempt against a local bridge (always HTTP)
    The total timeout bounds how long one slow bridge can hold up a round
    """
    connector = aiohttp.TCPConnector(
        limit_per_host=1,           # One request per attempt
        ssl=False,                  # Bridges are reached over plain HTTP on the LAN
        force_close=True,           # Force connection cleanup
        enable_cleanup_closed=True  # Additional cleanup
    )

    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout_seconds)
    )


def create_directory_session(
    timeout_seconds: float = 10,
    ssl_verify: bool = True,
    ca_cert_path: str = None
) -> aiohttp.ClientSession:
    """
    Create aiohttp session for the remote discovery directory
    """
    ssl_context = ssl.create_default_context()

    if not ssl_verify:
        # Disable SSL verification (for development/intercepting proxies)
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        logger.warning("SSL verification disabled for discovery directory")
    elif ca_cert_path:
        ca_path = Path(ca_cert_path)
        if ca_path.exists():
            ssl_context.load_verify_locations(ca_path)
            logger.info(f"Loaded custom CA certificate: {ca_path}")
        else:
            logger.warning(f"CA certificate not found: {ca_path}")

    connector = aiohttp.TCPConnector(
        ssl=ssl_context,
        limit=4,
        force_close=True,
        enable_cleanup_closed=True
    )

    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout_seconds)
    )
