"""
Resolves the target network profile from environment variables
"""

import logging
import os
import re
from typing import Mapping, Optional

from eth_keys.constants import SECPK1_N as SECP256K1_N

from ..errors import ConfigurationError
from ..models import CredentialStatus, NetworkProfile

NETWORK_NAME = 'hederaTestnet'
DEFAULT_RPC_URL = 'https://testnet.hashio.io/api'

# Checked in order; PRIVATE_KEY is the older name for the operator key
CREDENTIAL_VARS = ('HEDERA_OPERATOR_KEY', 'PRIVATE_KEY')

_PRIVATE_KEY_RE = re.compile(r'^0x[0-9a-fA-F]{64}$')

logger = logging.getLogger('dtra_deployer')


def _resolve_credential(env: Mapping[str, str]) -> tuple[Optional[str], CredentialStatus]:
    for var in CREDENTIAL_VARS:
        value = (env.get(var) or '').strip()
        if not value:
            continue
        # Valid secp256k1 scalars are 1 .. n-1
        if _PRIVATE_KEY_RE.match(value) and 0 < int(value, 16) < SECP256K1_N:
            return value, CredentialStatus.PRESENT
        logger.warning(f"{var} ignored: expected a 0x-prefixed 32-byte secp256k1 private key")
        return None, CredentialStatus.MALFORMED
    return None, CredentialStatus.MISSING


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw in (None, ''):
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def _float_setting(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw in (None, ''):
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {raw!r}")
    return value


def resolve_network_profile(env: Optional[Mapping[str, str]] = None) -> NetworkProfile:
    """Build the network profile for the Hedera testnet relay

    A missing RPC URL falls back to the public Hashio endpoint. A credential
    that does not look like a 0x-prefixed private key is dropped rather than
    rejected; the returned profile records why through ``credential_status``.
    """
    if env is None:
        env = os.environ

    rpc_url = (env.get('HEDERA_RPC_URL') or '').strip() or DEFAULT_RPC_URL
    private_key, status = _resolve_credential(env)

    return NetworkProfile(
        name=NETWORK_NAME,
        rpc_url=rpc_url,
        credential_status=status,
        private_key=private_key,
        tx_timeout=_int_setting(env, 'TX_TIMEOUT', 300),
        gas_limit=_int_setting(env, 'GAS_LIMIT', 6_000_000),
        priority_fee_gwei=_float_setting(env, 'PRIORITY_FEE_GWEI', 1.0),
    )
