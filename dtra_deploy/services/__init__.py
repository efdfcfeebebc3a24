"""
Services for resolving configuration and talking to the chain
"""

from .artifacts import SALE_CONTRACT, VAULT_CONTRACT, ArtifactStore, ContractArtifact
from .chain_client import ChainClient
from .network_resolver import resolve_network_profile
from .parameters import resolve_deployment_parameters

__all__ = [
    'SALE_CONTRACT',
    'VAULT_CONTRACT',
    'ArtifactStore',
    'ChainClient',
    'ContractArtifact',
    'resolve_deployment_parameters',
    'resolve_network_profile',
]
