"""
DTRA deployer - deploys the vesting vault and crowdsale to Hedera testnet
"""

__version__ = '0.1.0'
