"""
Exceptions raised by the DTRA deployer
"""


class DeployerError(Exception):
    """Base class for deployer errors"""


class ConfigurationError(DeployerError, ValueError):
    """Raised when required configuration is missing or invalid"""


class SigningUnavailableError(ConfigurationError):
    """Raised when a transaction must be signed but no usable key was resolved"""

    def __init__(self, credential_status):
        self.credential_status = credential_status
        super().__init__(
            f"No signing key available (credential {credential_status.value}). "
            "Set HEDERA_OPERATOR_KEY to a 0x-prefixed private key in .env"
        )


class ArtifactNotFoundError(ConfigurationError):
    """Raised when a compiled contract artifact cannot be located"""


class ChainConnectionError(DeployerError, ConnectionError):
    """Raised when the RPC endpoint cannot be reached"""


class TransactionFailedError(DeployerError):
    """Raised when a mined transaction reports a failed status"""

    def __init__(self, description: str, tx_hash: str):
        self.tx_hash = tx_hash
        super().__init__(f"{description} reverted (tx {tx_hash})")
