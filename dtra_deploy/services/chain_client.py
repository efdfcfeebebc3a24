"""
Chain client for deploying and calling contracts over JSON-RPC
"""

import logging
from typing import Any, Dict, Optional

from eth_account import Account
from web3 import Web3
from web3.exceptions import ContractLogicError

from ..errors import ChainConnectionError, SigningUnavailableError, TransactionFailedError
from ..models import DeployedContract, NetworkProfile
from .artifacts import ArtifactStore

# Headroom added on top of the node's gas estimate
GAS_BUFFER = 1.2
# Max fee allows the base fee to rise this much before the tx is stuck
BASE_FEE_MULTIPLIER = 1.2


class ChainClient:
    """Signs, sends and waits for transactions against one network"""

    def __init__(self, profile: NetworkProfile, artifacts: ArtifactStore, w3: Optional[Web3] = None):
        """Connect to the profile's RPC endpoint and load the signing key if present"""
        self.profile = profile
        self.artifacts = artifacts
        self.logger = logging.getLogger('dtra_deployer')

        self.w3 = w3 or Web3(Web3.HTTPProvider(profile.rpc_url, request_kwargs={'timeout': 30}))
        if not self.w3.is_connected():
            raise ChainConnectionError(f"Failed to connect to {profile.name} at {profile.rpc_url}")

        self.account = Account.from_key(profile.private_key) if profile.can_sign else None

    @property
    def can_sign(self) -> bool:
        return self.account is not None

    @property
    def address(self) -> Optional[str]:
        return self.account.address if self.account else None

    @property
    def chain_id(self) -> int:
        return self.w3.eth.chain_id

    def get_balance(self) -> float:
        """Get native balance of the deployer account"""
        if not self.account:
            return 0.0
        balance_wei = self.w3.eth.get_balance(self.account.address)
        return float(Web3.from_wei(balance_wei, 'ether'))

    def _fee_params(self) -> Dict[str, int]:
        """EIP-1559 fees when the network reports a base fee, legacy gas price otherwise"""
        latest = self.w3.eth.get_block('latest')
        base_fee = latest.get('baseFeePerGas')
        if base_fee:
            priority_fee = Web3.to_wei(self.profile.priority_fee_gwei, 'gwei')
            return {
                'maxPriorityFeePerGas': priority_fee,
                'maxFeePerGas': int(base_fee * BASE_FEE_MULTIPLIER) + priority_fee,
            }
        return {'gasPrice': self.w3.eth.gas_price}

    def _estimate_gas(self, call: Any, description: str) -> int:
        try:
            estimate = call.estimate_gas({'from': self.account.address})
        except ContractLogicError:
            # A revert during estimation will revert on chain too
            raise
        except Exception as e:
            self.logger.warning(f"Gas estimation failed for {description}, using {self.profile.gas_limit:,}: {e}")
            return self.profile.gas_limit
        return int(estimate * GAS_BUFFER)

    async def _send(self, call: Any, description: str) -> Dict[str, Any]:
        """Sign and send ``call``, then wait until it is mined"""
        if not self.account:
            raise SigningUnavailableError(self.profile.credential_status)

        tx_params = {
            'from': self.account.address,
            'nonce': self.w3.eth.get_transaction_count(self.account.address, 'pending'),
            'chainId': self.chain_id,
            'gas': self._estimate_gas(call, description),
        }
        tx_params.update(self._fee_params())
        tx = call.build_transaction(tx_params)

        signed_tx = self.account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        tx_hash_hex = Web3.to_hex(tx_hash)

        self.logger.info(f"{description}: sent {tx_hash_hex} (nonce {tx_params['nonce']}, gas {tx_params['gas']:,})")
        print(f"⏳ Waiting for confirmation of {description}...")

        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.profile.tx_timeout)
        if receipt['status'] != 1:
            raise TransactionFailedError(description, tx_hash_hex)

        self.logger.debug(f"{description}: mined in block {receipt.get('blockNumber')}")
        return receipt

    async def deploy(self, name: str, *args: Any) -> DeployedContract:
        """Deploy contract ``name`` with constructor ``args`` and wait for its address"""
        artifact = self.artifacts.load(name)
        factory = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

        receipt = await self._send(factory.constructor(*args), f"{name} deployment")
        address = receipt['contractAddress']
        if not address:
            raise TransactionFailedError(f"{name} deployment (no contract address)", Web3.to_hex(receipt['transactionHash']))

        return DeployedContract(
            name=name,
            address=Web3.to_checksum_address(address),
            tx_hash=Web3.to_hex(receipt['transactionHash']),
            abi=artifact.abi,
        )

    async def transact(self, contract: DeployedContract, method: str, *args: Any) -> str:
        """Call state-changing ``method`` on a deployed contract and return the tx hash"""
        instance = self.w3.eth.contract(address=contract.address, abi=contract.abi)
        call = getattr(instance.functions, method)(*args)

        receipt = await self._send(call, f"{contract.name}.{method}")
        return Web3.to_hex(receipt['transactionHash'])
