"""
Network profile for the target chain
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CredentialStatus(Enum):
    """Outcome of resolving the signing key from the environment"""
    PRESENT = "present"
    MISSING = "missing"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class NetworkProfile:
    """Represents the resolved RPC endpoint and signing credential"""
    name: str
    rpc_url: str
    credential_status: CredentialStatus
    private_key: Optional[str] = field(default=None, repr=False)
    tx_timeout: int = 300  # Seconds to wait for a receipt
    gas_limit: int = 6_000_000  # Used when gas estimation is unavailable
    priority_fee_gwei: float = 1.0

    @property
    def can_sign(self) -> bool:
        return self.private_key is not None
