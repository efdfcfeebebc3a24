from unittest.mock import MagicMock

import pytest
from eth_keys.constants import SECPK1_N as SECP256K1_N

from conftest import OPERATOR_KEY
from dtra_deploy.errors import ConfigurationError
from dtra_deploy.models import CredentialStatus
from dtra_deploy.services import ArtifactStore, ChainClient
from dtra_deploy.services.network_resolver import DEFAULT_RPC_URL, resolve_network_profile


def test_defaults_to_public_testnet_endpoint():
    profile = resolve_network_profile({})

    assert profile.name == 'hederaTestnet'
    assert profile.rpc_url == DEFAULT_RPC_URL
    assert profile.private_key is None
    assert profile.credential_status is CredentialStatus.MISSING
    assert profile.tx_timeout == 300
    assert profile.gas_limit == 6_000_000


def test_uses_configured_rpc_url_and_key():
    profile = resolve_network_profile({
        'HEDERA_RPC_URL': 'https://mainnet.hashio.io/api',
        'HEDERA_OPERATOR_KEY': OPERATOR_KEY,
    })

    assert profile.rpc_url == 'https://mainnet.hashio.io/api'
    assert profile.private_key == OPERATOR_KEY
    assert profile.credential_status is CredentialStatus.PRESENT
    assert profile.can_sign


def test_falls_back_to_private_key_variable():
    profile = resolve_network_profile({'PRIVATE_KEY': OPERATOR_KEY})
    assert profile.private_key == OPERATOR_KEY


@pytest.mark.parametrize("raw_key", [
    '11' * 32,  # missing 0x prefix
    '0x1234',
    '0x' + 'zz' * 32,
    '302e020100300506032b657004220420' + '11' * 32,  # DER encoded ED25519 key
])
def test_malformed_key_is_treated_as_absent(raw_key):
    profile = resolve_network_profile({'HEDERA_OPERATOR_KEY': raw_key})

    assert profile.private_key is None
    assert profile.credential_status is CredentialStatus.MALFORMED
    assert not profile.can_sign


def test_key_is_not_shown_in_repr():
    profile = resolve_network_profile({'HEDERA_OPERATOR_KEY': OPERATOR_KEY})
    assert OPERATOR_KEY not in repr(profile)


def test_malformed_key_never_reaches_account_loading(monkeypatch, tmp_path):
    seen = []
    monkeypatch.setattr(
        "dtra_deploy.services.chain_client.Account.from_key",
        lambda key: seen.append(key),
    )
    profile = resolve_network_profile({'HEDERA_OPERATOR_KEY': '11' * 32})

    client = ChainClient(profile, ArtifactStore(tmp_path), w3=MagicMock())

    assert seen == []
    assert not client.can_sign
    assert client.address is None


@pytest.mark.parametrize("name,value", [
    ('TX_TIMEOUT', 'soon'),
    ('TX_TIMEOUT', '0'),
    ('GAS_LIMIT', '-5'),
    ('PRIORITY_FEE_GWEI', 'cheap'),
])
def test_invalid_tuning_values_are_configuration_errors(name, value):
    with pytest.raises(ConfigurationError, match=name):
        resolve_network_profile({name: value})


def test_tuning_values_are_read():
    profile = resolve_network_profile({'TX_TIMEOUT': '60', 'GAS_LIMIT': '3000000', 'PRIORITY_FEE_GWEI': '2.5'})

    assert profile.tx_timeout == 60
    assert profile.gas_limit == 3_000_000
    assert profile.priority_fee_gwei == 2.5


@pytest.mark.parametrize("raw_key", [
    '0x' + '00' * 32,
    f'0x{SECP256K1_N:064x}',
    '0x' + 'ff' * 32,
])
def test_key_outside_curve_order_is_malformed(raw_key):
    profile = resolve_network_profile({'HEDERA_OPERATOR_KEY': raw_key})

    assert profile.private_key is None
    assert profile.credential_status is CredentialStatus.MALFORMED


def test_largest_valid_key_is_accepted(tmp_path):
    raw_key = f'0x{SECP256K1_N - 1:064x}'
    profile = resolve_network_profile({'HEDERA_OPERATOR_KEY': raw_key})

    assert profile.credential_status is CredentialStatus.PRESENT
    client = ChainClient(profile, ArtifactStore(tmp_path), w3=MagicMock())
    assert client.can_sign
