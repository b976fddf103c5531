"""
Network discovery strategies for bridges
Multicast (mDNS) browsing and the remote directory lookup
"""

import asyncio
import ipaddress
import logging
from typing import List, Optional

import aiohttp
from zeroconf import IPVersion, ServiceStateChange
from zeroconf.asyncio import AsyncServiceBrowser, AsyncServiceInfo, AsyncZeroconf

from config_loader import get_discovery_ssl_config
from errors import DiscoveryError, NoCandidatesError
from http_helper import create_directory_session
from .models import BridgeCandidate

logger = logging.getLogger(__name__)

# Milliseconds allowed for a single service-info resolution
SERVICE_INFO_TIMEOUT_MS = 3000


class DiscoveryProvider:
    """A strategy that produces bridge candidates"""

    method = "unknown"

    async def discover(self) -> List[BridgeCandidate]:
        raise NotImplementedError


def format_address(raw_address: str) -> Optional[str]:
    """
    Normalize an advertised address into a host usable in a URL
    Returns None for anything that is not an IPv4/IPv6 literal
    """
    try:
        ip = ipaddress.ip_address(raw_address.split('%', 1)[0])
    except (ValueError, AttributeError):
        return None
    if ip.version == 6:
        return f"[{ip}]"
    return str(ip)


def extract_address(info) -> Optional[str]:
    """Pick a usable address from resolved service info, IPv4 records first"""
    addresses = info.parsed_addresses(IPVersion.All)
    ordered = sorted(addresses, key=lambda a: ':' in a)
    for raw_address in ordered:
        address = format_address(raw_address)
        if address:
            return address
    return None


class MulticastDiscovery(DiscoveryProvider):
    """Listens for bridge advertisements on the local network"""

    method = "mdns"

    def __init__(self, config: dict):
        self.service_type = config.get('mdns_service', '_hue._tcp.local.')
        self.listen_timeout = config.get('mdns_timeout', 3)

    async def discover(self) -> List[BridgeCandidate]:
        """
        Browse for the bridge service until the first advertisement resolves to an address
        Returns an empty list when the listening window elapses without a usable hit
        """
        try:
            aiozc = AsyncZeroconf(ip_version=IPVersion.All)
        except OSError as e:
            logger.error(f"mDNS listener could not start: {e}")
            raise DiscoveryError(f"mDNS listener could not start: {e}") from e

        found = asyncio.get_running_loop().create_future()
        resolving = set()
        browser = None

        def on_service_state_change(zeroconf, service_type: str, name: str,
                                    state_change: ServiceStateChange) -> None:
            if state_change is not ServiceStateChange.Added or found.done():
                return
            task = asyncio.ensure_future(self._resolve(aiozc, service_type, name, found))
            resolving.add(task)
            task.add_done_callback(resolving.discard)

        try:
            try:
                browser = AsyncServiceBrowser(aiozc.zeroconf, [self.service_type],
                                              handlers=[on_service_state_change])
            except OSError as e:
                logger.error(f"mDNS browse could not start: {e}")
                raise DiscoveryError(f"mDNS browse could not start: {e}") from e

            logger.info(f"Listening for {self.service_type} advertisements ({self.listen_timeout}s)...")
            try:
                candidate = await asyncio.wait_for(found, timeout=self.listen_timeout)
            except asyncio.TimeoutError:
                logger.info("No bridge advertisement resolved to an address")
                return []

            logger.info(f"Found bridge via mDNS at {candidate.address}")
            return [candidate]

        finally:
            for task in list(resolving):
                task.cancel()
            await asyncio.gather(*resolving, return_exceptions=True)
            if browser is not None:
                await browser.async_cancel()
            await aiozc.async_close()

    async def _resolve(self, aiozc, service_type: str, name: str, found: asyncio.Future) -> None:
        """Resolve one advertisement and hand the first usable address to the waiter"""
        try:
            info = AsyncServiceInfo(service_type, name)
            if not await info.async_request(aiozc.zeroconf, SERVICE_INFO_TIMEOUT_MS):
                logger.debug(f"No service info for {name}")
                return

            address = extract_address(info)
            if address is None:
                logger.info(f"Bridge {name} does not advertise an address")
                return

            if not found.done():
                found.set_result(BridgeCandidate(address=address, discovery_method=self.method, name=name))
        except Exception as e:
            logger.warning(f"Error resolving advertisement {name}: {e}")


class DirectoryDiscovery(DiscoveryProvider):
    """Asks the remote discovery directory which bridges it knows on this network"""

    method = "directory"

    def __init__(self, config: dict):
        self.directory_url = config.get('directory_url', 'https://discovery.meethue.com/')
        self.ssl_config = get_discovery_ssl_config(config)

    async def discover(self) -> List[BridgeCandidate]:
        logger.info(f"Querying discovery directory {self.directory_url}...")
        try:
            async with create_directory_session(**self.ssl_config) as session:
                async with session.get(self.directory_url) as response:
                    response.raise_for_status()
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Directory lookup failed: {e!r}")
            raise DiscoveryError(f"Directory lookup failed: {e!r}") from e
        except ValueError as e:
            logger.error(f"Directory response is not valid JSON: {e}")
            raise DiscoveryError(f"Directory response is not valid JSON: {e}") from e

        candidates = self._parse_directory(payload)
        if not candidates:
            raise NoCandidatesError()

        logger.info(f"Directory knows {len(candidates)} bridge(s): "
                    f"{', '.join(c.address for c in candidates)}")
        return candidates

    def _parse_directory(self, payload) -> List[BridgeCandidate]:
        """Parse the directory's JSON array of bridge entries"""
        if not isinstance(payload, list):
            raise DiscoveryError(f"Unexpected directory response: expected a list, got {type(payload).__name__}")

        candidates = []
        for entry in payload:
            raw_address = entry.get('internalipaddress') if isinstance(entry, dict) else None
            address = format_address(raw_address.strip()) if isinstance(raw_address, str) else None
            if address is None:
                logger.warning(f"Skipping directory entry without a usable internalipaddress: {entry}")
                continue
            bridge_id = entry.get('id')
            candidates.append(BridgeCandidate(
                address=address,
                discovery_method=self.method,
                bridge_id=bridge_id if isinstance(bridge_id, str) else None
            ))
        return candidates
