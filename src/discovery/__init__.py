"""
Discovery module for bridge discovery
"""

from .manager import BridgeDiscovery
from .models import BridgeCandidate, DiscoveryResult
from .network_discovery import DiscoveryProvider, MulticastDiscovery, DirectoryDiscovery

__all__ = ['BridgeDiscovery', 'BridgeCandidate', 'DiscoveryResult',
           'DiscoveryProvider', 'MulticastDiscovery', 'DirectoryDiscovery']
