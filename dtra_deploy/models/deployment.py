"""
Deployment models for the vesting vault and crowdsale contracts
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

# DTRA uses 8 decimals; caps and prices are scaled the same way
DTRA_DECIMALS = 8

DEFAULT_SALE_CAP = "10000000"  # 10M DTRA
DEFAULT_PRICE_NUMERATOR = "5"  # 1 HBAR -> 5 DTRA
DEFAULT_PRICE_DENOMINATOR = "1"

# Largest value a uint256 constructor/setter argument can carry
MAX_UINT256 = 2**256 - 1

_AMOUNT_RE = re.compile(r'([0-9]*)(?:\.([0-9]*))?')


def parse_units(value: Union[str, int, Decimal], decimals: int = DTRA_DECIMALS) -> int:
    """Convert a human readable amount into a fixed-point integer

    Works on the digits directly so no precision is lost on large amounts.

    Raises:
        ValueError: if the amount is negative, not a plain decimal number,
            has more fractional digits than ``decimals`` or does not fit
            in a uint256.
    """
    text = format(value, 'f') if isinstance(value, Decimal) else str(value).strip()
    match = _AMOUNT_RE.fullmatch(text)
    if not match or not (match.group(1) or match.group(2)):
        raise ValueError(f"Invalid amount: {value!r}")

    whole = match.group(1) or '0'
    fraction = (match.group(2) or '').rstrip('0')
    if len(fraction) > decimals:
        raise ValueError(f"Amount {value!r} has more than {decimals} decimal places")

    scaled = int(whole) * 10**decimals + int(fraction.ljust(decimals, '0') or '0')
    if scaled > MAX_UINT256:
        raise ValueError(f"Amount {value!r} does not fit in uint256")
    return scaled


def format_units(value: int, decimals: int = DTRA_DECIMALS) -> str:
    """Render a fixed-point integer as a decimal string"""
    whole, fraction = divmod(value, 10**decimals)
    fraction_text = str(fraction).rjust(decimals, '0').rstrip('0')
    return f"{whole}.{fraction_text}" if fraction_text else str(whole)


@dataclass(frozen=True)
class DeploymentParameters:
    """Inputs for the vault and crowdsale deployment"""
    token_address: str
    treasury_address: str
    cap: int = parse_units(DEFAULT_SALE_CAP)
    price_numerator: int = parse_units(DEFAULT_PRICE_NUMERATOR)
    price_denominator: int = parse_units(DEFAULT_PRICE_DENOMINATOR)


@dataclass
class DeployedContract:
    """Handle for a contract once its deployment has been mined"""
    name: str
    address: str
    tx_hash: str
    abi: List[Dict[str, Any]] = field(default_factory=list, repr=False)


class DeploymentStep(IntEnum):
    """Ordered steps of the deployment"""
    DEPLOY_VAULT = 1
    DEPLOY_SALE = 2
    WIRE_VESTING = 3
    SET_PRICE = 4
    REPORT = 5


@dataclass
class DeploymentReport:
    """Result of a complete deployment run"""
    vault: DeployedContract
    sale: DeployedContract
    price_set: bool = False
    steps_completed: int = 0
    price_tx_hash: Optional[str] = None
    vesting_tx_hash: Optional[str] = None
