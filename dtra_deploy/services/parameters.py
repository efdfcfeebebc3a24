"""
Resolves deployment parameters from environment variables
"""

import os
from typing import Mapping, Optional

from eth_utils import is_address, to_checksum_address

from ..errors import ConfigurationError
from ..models import DeploymentParameters
from ..models.deployment import (
    DEFAULT_PRICE_DENOMINATOR,
    DEFAULT_PRICE_NUMERATOR,
    DEFAULT_SALE_CAP,
    parse_units,
)

REQUIRED_VARS = ('DTRA_TOKEN', 'TREASURY')


def _address(env: Mapping[str, str], name: str) -> str:
    value = env[name].strip()
    if not is_address(value):
        raise ConfigurationError(f"{name} is not a valid EVM address: {value!r}")
    return to_checksum_address(value)


def _amount(env: Mapping[str, str], name: str, default: str) -> int:
    raw = (env.get(name) or '').strip() or default
    try:
        amount = parse_units(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name}: {e}")
    if amount == 0:
        raise ConfigurationError(f"{name} must be greater than zero")
    return amount


def resolve_deployment_parameters(env: Optional[Mapping[str, str]] = None) -> DeploymentParameters:
    """Read token, treasury, cap and price settings

    Raises:
        ConfigurationError: if DTRA_TOKEN or TREASURY is missing or invalid,
            or an amount is zero or cannot be encoded with 8 decimals.
    """
    if env is None:
        env = os.environ

    missing = [var for var in REQUIRED_VARS if not (env.get(var) or '').strip()]
    if missing:
        raise ConfigurationError(f"Set DTRA_TOKEN & TREASURY in .env (missing: {', '.join(missing)})")

    return DeploymentParameters(
        token_address=_address(env, 'DTRA_TOKEN'),
        treasury_address=_address(env, 'TREASURY'),
        cap=_amount(env, 'SALE_CAP', DEFAULT_SALE_CAP),
        price_numerator=_amount(env, 'PRICE_NUMERATOR', DEFAULT_PRICE_NUMERATOR),
        price_denominator=_amount(env, 'PRICE_DENOMINATOR', DEFAULT_PRICE_DENOMINATOR),
    )
