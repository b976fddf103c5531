"""
Pairing module: authorization attempts and the polling coordinator
"""

from .models import Credential, AttemptOutcome, AttemptResult
from .authorizer import BridgeAuthorizer
from .coordinator import PairingCoordinator

__all__ = ['Credential', 'AttemptOutcome', 'AttemptResult', 'BridgeAuthorizer', 'PairingCoordinator']
