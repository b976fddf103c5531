"""
Discovery manager selecting between the multicast and directory strategies
"""

import logging
import time
from typing import Dict, Optional

from errors import DiscoveryError
from .models import DiscoveryResult
from .network_discovery import DiscoveryProvider, MulticastDiscovery, DirectoryDiscovery

logger = logging.getLogger(__name__)


class BridgeDiscovery:
    """Main discovery service for bridges"""

    def __init__(self, config: Dict, providers: Optional[Dict[str, DiscoveryProvider]] = None):
        self.config = config
        self.default_method = config.get('method', 'auto')
        self.providers = providers or {
            'mdns': MulticastDiscovery(config),
            'directory': DirectoryDiscovery(config),
        }

    async def discover(self, method: Optional[str] = None) -> DiscoveryResult:
        """
        Run discovery with the requested strategy
        "auto" listens for multicast first and falls back to the directory on an empty result
        """
        method = method or self.default_method
        if method == 'auto':
            return await self.discover_auto()
        return await self._run_provider(method)

    async def discover_auto(self) -> DiscoveryResult:
        """Multicast first, directory lookup when the local network stays silent"""
        logger.info("[DISCOVERY] Trying mDNS before the discovery directory...")
        try:
            result = await self._run_provider('mdns')
        except DiscoveryError as e:
            logger.warning(f"mDNS discovery unavailable, falling back to directory: {e}")
        else:
            if result.candidates:
                return result
            logger.info("[DISCOVERY] mDNS found nothing - trying the discovery directory")

        return await self._run_provider('directory')

    async def _run_provider(self, method: str) -> DiscoveryResult:
        provider = self.providers.get(method)
        if provider is None:
            raise ValueError(f"Unknown discovery method: {method}")

        start_time = time.time()
        candidates = await provider.discover()
        duration = time.time() - start_time

        logger.info(f"[DISCOVERY] {method}: {len(candidates)} candidate(s) in {duration:.1f}s")
        return DiscoveryResult(candidates, method, duration)
