"""
Discovery data structures and models
"""

from typing import List, Optional
from dataclasses import dataclass


@dataclass(frozen=True)
class BridgeCandidate:
    """A discovered bridge address worth attempting authorization against"""
    address: str
    discovery_method: str  # "mdns", "directory"
    bridge_id: Optional[str] = None
    name: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"internalipaddress": self.address}
        if self.bridge_id:
            data["id"] = self.bridge_id
        if self.name:
            data["name"] = self.name
        return data


@dataclass
class DiscoveryResult:
    """Results from a discovery run"""
    candidates: List[BridgeCandidate]
    method: str
    duration_seconds: float

    @property
    def addresses(self) -> List[str]:
        return [candidate.address for candidate in self.candidates]
