"""
Service layer tying discovery, pairing and storage together
"""

from .pairing_service import BridgePairingService

__all__ = ['BridgePairingService']
