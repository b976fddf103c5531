"""
Bridge Pairing Service - wires discovery, the polling coordinator and the credential store
"""

import logging
import time
from typing import Dict, Optional

from discovery.manager import BridgeDiscovery
from discovery.models import DiscoveryResult
from errors import NoCandidatesError
from pairing.coordinator import PairingCoordinator, RoundCallback
from pairing.models import Credential
from storage.credential_store import CredentialStore

logger = logging.getLogger(__name__)


class BridgePairingService:
    """Finds bridges and pairs with the first one whose link button gets pressed"""

    def __init__(self, config: Dict, discovery: Optional[BridgeDiscovery] = None,
                 store: Optional[CredentialStore] = None,
                 coordinator: Optional[PairingCoordinator] = None):
        self.config = config
        self.discovery = discovery or BridgeDiscovery(config['discovery'])
        self.store = store or CredentialStore.from_config(config)
        self.coordinator = coordinator or PairingCoordinator.from_config(config['pairing'], store=self.store)

        # Last run bookkeeping for the health endpoint
        self.pairing_in_progress = False
        self.last_result: Optional[str] = None
        self.last_error: Optional[str] = None

    async def discover(self, method: Optional[str] = None) -> DiscoveryResult:
        return await self.discovery.discover(method)

    async def pair(self, method: Optional[str] = None,
                   on_round: Optional[RoundCallback] = None) -> Credential:
        """
        Discover candidates, then poll them until one issues a credential
        An empty discovery result raises NoCandidatesError before any polling starts
        """
        logger.info("[LAUNCH] Starting bridge pairing...")
        start_time = time.time()
        self.pairing_in_progress = True
        try:
            result = await self.discover(method)
            if not result.candidates:
                raise NoCandidatesError()

            credential = await self.coordinator.run(result.addresses, on_round=on_round)

        except Exception as e:
            self.last_result = "failed"
            self.last_error = str(e)
            raise
        finally:
            self.pairing_in_progress = False

        self.last_result = "paired"
        self.last_error = None
        logger.info(f"[SUCCESS] Paired with bridge {credential.bridge_address} in {time.time() - start_time:.1f}s")
        return credential

    def load_credential(self) -> Credential:
        return self.store.load()

    def save_credential(self, credential: Credential) -> None:
        self.store.save(credential)

    def has_credential(self) -> bool:
        return self.store.exists()

    def get_status(self) -> Dict:
        return {
            "paired": self.store.exists(),
            "pairing_in_progress": self.pairing_in_progress,
            "last_result": self.last_result,
            "last_error": self.last_error,
            "credential_path": str(self.store.path),
        }
