"""
Data models for the DTRA deployer
"""

from .deployment import (
    DTRA_DECIMALS,
    DeployedContract,
    DeploymentParameters,
    DeploymentReport,
    DeploymentStep,
    format_units,
    parse_units,
)
from .network import CredentialStatus, NetworkProfile

__all__ = [
    'DTRA_DECIMALS',
    'CredentialStatus',
    'DeployedContract',
    'DeploymentParameters',
    'DeploymentReport',
    'DeploymentStep',
    'NetworkProfile',
    'format_units',
    'parse_units',
]
