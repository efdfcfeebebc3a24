"""Shared fixtures and a simulated chain for deployer tests"""

import json
import logging
import os
from pathlib import Path
from types import SimpleNamespace

import pytest
from eth_utils import to_checksum_address

from dtra_deploy.models import CredentialStatus, DeployedContract, NetworkProfile

OPERATOR_KEY = '0x' + '11' * 32
TOKEN = '0x1111111111111111111111111111111111111111'
TREASURY = '0x2222222222222222222222222222222222222222'


def random_address() -> str:
    return to_checksum_address('0x' + os.urandom(20).hex())


class RemoteCallFailed(Exception):
    """Stands in for whatever the call layer raises"""


class FakeChain:
    """Records every remote call instead of sending transactions"""

    def __init__(self, profile=None, artifacts=None, fail_on=None, can_sign=True):
        self.profile = profile or SimpleNamespace(credential_status=CredentialStatus.PRESENT)
        self.artifacts = artifacts
        self.fail_on = fail_on  # contract name or method name that should fail
        self.calls = []
        self._can_sign = can_sign
        self.chain_id = 296
        self.address = random_address()

    @property
    def can_sign(self) -> bool:
        return self._can_sign

    def get_balance(self) -> float:
        return 100.0

    async def deploy(self, name, *args):
        self.calls.append(('deploy', name, args))
        if self.fail_on == name:
            raise RemoteCallFailed(f"{name} deployment reverted")
        return DeployedContract(name=name, address=random_address(), tx_hash='0x' + os.urandom(32).hex())

    async def transact(self, contract, method, *args):
        self.calls.append(('transact', method, args))
        if self.fail_on == method:
            raise RemoteCallFailed(f"{method} reverted")
        return '0x' + os.urandom(32).hex()


@pytest.fixture()
def profile() -> NetworkProfile:
    return NetworkProfile(
        name='hederaTestnet',
        rpc_url='http://127.0.0.1:7546',
        credential_status=CredentialStatus.PRESENT,
        private_key=OPERATOR_KEY,
    )


def write_artifact(base: Path, name: str) -> Path:
    folder = base / 'contracts' / f'{name}.sol'
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / f'{name}.json'
    path.write_text(
        json.dumps({
            'contractName': name,
            'abi': [{'type': 'constructor', 'inputs': [], 'stateMutability': 'nonpayable'}],
            'bytecode': '0x6080604052',
        }),
        encoding='utf-8',
    )
    # Hardhat writes debug files next to each artifact
    (folder / f'{name}.dbg.json').write_text('{"buildInfo": "../../build-info/x.json"}', encoding='utf-8')
    return path


@pytest.fixture()
def artifacts_dir(tmp_path: Path) -> Path:
    base = tmp_path / 'artifacts'
    write_artifact(base, 'DTRAVestingVault')
    write_artifact(base, 'DTRACrowdsale')
    return base


@pytest.fixture()
def deploy_env(tmp_path: Path, artifacts_dir: Path) -> dict:
    return {
        'HEDERA_OPERATOR_KEY': OPERATOR_KEY,
        'DTRA_TOKEN': TOKEN,
        'TREASURY': TREASURY,
        'ARTIFACTS_DIR': str(artifacts_dir),
        'LOG_DIR': str(tmp_path / 'logs'),
    }


@pytest.fixture(autouse=True)
def reset_deployer_logger():
    yield
    logger = logging.getLogger('dtra_deployer')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
