"""
Bridge command routes: credential load/save, discovery and pairing
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import List, Optional
import logging

from errors import (PairingError, DiscoveryError, NoCandidatesError,
                    NoCredentialError, PersistenceError)
from pairing.models import Credential

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NoCandidatesError: 404,
    DiscoveryError: 502,
    NoCredentialError: 504,
    PersistenceError: 500,
}


# Request/response models
class CredentialModel(BaseModel):
    username: str
    bridge_address: str


class BridgeModel(BaseModel):
    internalipaddress: str
    id: Optional[str] = None
    name: Optional[str] = None


class PairingRequest(BaseModel):
    method: Optional[str] = None


def to_http_error(error: PairingError) -> HTTPException:
    """Convert a pairing failure into an HTTP error carrying its message"""
    status_code = next((code for kind, code in ERROR_STATUS.items() if isinstance(error, kind)), 500)
    return HTTPException(status_code=status_code, detail=error.message)


def create_bridge_routes(service):
    """Create credential, discovery and pairing routes"""
    router = APIRouter(prefix="/api", tags=["bridge"])

    @router.get("/credential", response_model=CredentialModel)
    async def load_credential():
        """Load the stored credential"""
        if not service.has_credential():
            raise HTTPException(status_code=404, detail="No credential stored")
        try:
            credential = service.load_credential()
        except PairingError as e:
            logger.error(f"Error loading credential: {e}")
            raise to_http_error(e)
        return CredentialModel(username=credential.username, bridge_address=credential.bridge_address)

    @router.put("/credential")
    async def save_credential(body: CredentialModel):
        """Store a credential, replacing any previous one"""
        try:
            service.save_credential(Credential(username=body.username, bridge_address=body.bridge_address))
        except PairingError as e:
            logger.error(f"Error saving credential: {e}")
            raise to_http_error(e)
        return {"message": "Credential saved"}

    @router.get("/discovery/directory", response_model=List[BridgeModel])
    async def discover_via_directory():
        """Find bridges through the remote discovery directory"""
        try:
            result = await service.discover('directory')
        except PairingError as e:
            logger.error(f"Directory discovery failed: {e}")
            raise to_http_error(e)
        return [BridgeModel(**candidate.to_dict()) for candidate in result.candidates]

    @router.get("/discovery/mdns", response_model=List[BridgeModel])
    async def discover_via_multicast():
        """Find bridges by listening for mDNS advertisements"""
        try:
            result = await service.discover('mdns')
        except PairingError as e:
            logger.error(f"mDNS discovery failed: {e}")
            raise to_http_error(e)
        return [BridgeModel(**candidate.to_dict()) for candidate in result.candidates]

    @router.post("/pairing", response_model=CredentialModel)
    async def start_pairing(body: Optional[PairingRequest] = None):
        """Discover bridges and poll them until the link button is pressed"""
        if service.pairing_in_progress:
            raise HTTPException(status_code=409, detail="Pairing already in progress")

        method = body.method if body else None
        if method not in (None, 'mdns', 'directory', 'auto'):
            raise HTTPException(status_code=400, detail=f"Unknown discovery method: {method}")

        try:
            credential = await service.pair(method)
        except PairingError as e:
            logger.error(f"Pairing failed: {e}")
            raise to_http_error(e)
        return CredentialModel(username=credential.username, bridge_address=credential.bridge_address)

    return router
