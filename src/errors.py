"""
Error taxonomy for bridge discovery and pairing
Per-attempt outcomes are values (see pairing.models), only terminal failures are raised
"""


class PairingError(Exception):
    """Base class for all surfaced pairing failures"""

    default_message = "Bridge pairing failed"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class DiscoveryError(PairingError):
    """Transport, bind or decode failure inside a discovery strategy"""

    default_message = "Bridge discovery failed"


class NoCandidatesError(PairingError):
    """Discovery worked but knows of no bridges"""

    default_message = "No bridges found"


class NoCredentialError(PairingError):
    """Round budget exhausted without any bridge issuing a credential"""

    default_message = "No devices responded to pairing"


class PersistenceError(PairingError):
    """Reading or writing the credential file failed"""

    default_message = "Credential storage failed"
