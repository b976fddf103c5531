"""
Pairing data structures and models
"""

from enum import Enum
from typing import Optional
from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class Credential:
    """Token issued by a bridge plus the address of the bridge that issued it"""
    username: str
    bridge_address: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Credential":
        username = data.get('username')
        bridge_address = data.get('bridge_address')
        if not isinstance(username, str) or not isinstance(bridge_address, str):
            raise ValueError("credential requires string fields username and bridge_address")
        return cls(username=username, bridge_address=bridge_address)


class AttemptOutcome(Enum):
    """Result kind of one authorization attempt"""
    CREDENTIAL = "credential"
    REJECTED = "rejected"          # Bridge answered but the link button was not pressed
    UNREACHABLE = "unreachable"    # Connection refused, timeout or other transport failure
    MALFORMED = "malformed"        # Response was not the expected shape


@dataclass
class AttemptResult:
    """Outcome of one authorization attempt against one candidate"""
    address: str
    outcome: AttemptOutcome
    credential: Optional[Credential] = None
    detail: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is AttemptOutcome.CREDENTIAL
