#!/usr/bin/env python3
"""
DTRA Crowdsale Deployer
Deploys the DTRA vesting vault and crowdsale to Hedera testnet, links the
vault into the sale and sets the HBAR price.

Usage:
- Set up your .env file with HEDERA_OPERATOR_KEY, DTRA_TOKEN, TREASURY, etc.
- Compile the contracts with `npx hardhat compile`
- Run: python deploy_crowdsale.py            (deploy)
       python deploy_crowdsale.py --check    (read-only connection check)
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional, Sequence

from dotenv import load_dotenv
from web3.constants import ADDRESS_ZERO

from dtra_deploy.errors import ConfigurationError, SigningUnavailableError
from dtra_deploy.models import (
    DeploymentParameters,
    DeploymentReport,
    DeploymentStep,
    NetworkProfile,
    format_units,
)
from dtra_deploy.services import (
    SALE_CONTRACT,
    VAULT_CONTRACT,
    ArtifactStore,
    ChainClient,
    resolve_deployment_parameters,
    resolve_network_profile,
)

# setPrice treats the zero address as the network's native coin (HBAR)
NATIVE_CURRENCY = ADDRESS_ZERO


def setup_logging(log_dir: str = 'logs', debug: bool = False) -> logging.Logger:
    """Setup logging"""
    os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger('dtra_deployer')
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(Path(log_dir) / 'deployer.log', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)

    formatter = logging.Formatter('%(asctime)s | %(levelname)s | %(message)s')
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    return logger


class CrowdsaleDeployer:
    """Deploys and wires the vesting vault and crowdsale, one step at a time"""

    def __init__(self, params: DeploymentParameters, chain: ChainClient):
        self.params = params
        self.chain = chain
        self.logger = logging.getLogger('dtra_deployer')
        self.steps_completed = 0

    def _complete(self, step: DeploymentStep):
        self.steps_completed = step.value
        self.logger.debug(f"Step {step.value}/{len(DeploymentStep)} complete: {step.name}")

    async def deploy(self) -> DeploymentReport:
        """Run the deployment

        Each step waits for its transaction to be mined before the next one
        starts. The first failure aborts the run and is re-raised unchanged;
        contracts already deployed are left on chain.
        """
        if not self.chain.can_sign:
            raise SigningUnavailableError(self.chain.profile.credential_status)

        params = self.params
        step = DeploymentStep.DEPLOY_VAULT
        try:
            vault = await self.chain.deploy(VAULT_CONTRACT, params.token_address)
            self._complete(step)
            print(f"VestingVault: {vault.address}")
            self.logger.info(f"VestingVault deployed at {vault.address} (tx {vault.tx_hash})")

            step = DeploymentStep.DEPLOY_SALE
            sale = await self.chain.deploy(
                SALE_CONTRACT, params.token_address, params.treasury_address, params.cap
            )
            self._complete(step)
            print(f"Crowdsale: {sale.address}")
            self.logger.info(f"Crowdsale deployed at {sale.address} with cap {format_units(params.cap)} DTRA")

            step = DeploymentStep.WIRE_VESTING
            vesting_tx = await self.chain.transact(sale, 'setVesting', vault.address)
            self._complete(step)
            self.logger.info(f"Vesting vault {vault.address} set on crowdsale (tx {vesting_tx})")

            step = DeploymentStep.SET_PRICE
            price_tx = await self.chain.transact(
                sale, 'setPrice', NATIVE_CURRENCY, params.price_numerator, params.price_denominator, True
            )
            self._complete(step)
        except Exception as e:
            self.logger.error(
                f"Deployment aborted at step {step.value} ({step.name}) "
                f"after {self.steps_completed} completed step(s): {e}"
            )
            raise

        step = DeploymentStep.REPORT
        print("HBAR price set")
        self.logger.info(
            f"HBAR price set: 1 HBAR -> {format_units(params.price_numerator)}/"
            f"{format_units(params.price_denominator)} DTRA (tx {price_tx})"
        )
        self._complete(step)

        return DeploymentReport(
            vault=vault,
            sale=sale,
            price_set=True,
            steps_completed=self.steps_completed,
            price_tx_hash=price_tx,
            vesting_tx_hash=vesting_tx,
        )


def print_banner(profile: NetworkProfile, chain: ChainClient):
    """Print connection details before doing anything on chain"""
    print("🚀 DTRA CROWDSALE DEPLOYER")
    print("=" * 50)
    print(f"🌐 Network: {profile.name} ({profile.rpc_url})")
    print(f"✅ Connected (Chain ID: {chain.chain_id})")
    if chain.can_sign:
        print(f"👤 Deployer: {chain.address}")
        print(f"💰 Balance: {chain.get_balance():.4f} HBAR")
    else:
        print(f"🔒 Signing key: {profile.credential_status.value} (read-only)")
    print("=" * 50)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Deploy the DTRA vesting vault and crowdsale.")
    parser.add_argument('--check', action='store_true', help="connect and show account details without sending transactions")
    parser.add_argument('--artifacts', help="Hardhat artifacts directory (default: $ARTIFACTS_DIR or ./artifacts)")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace, env: Mapping[str, str]) -> Optional[DeploymentReport]:
    """Resolve configuration, connect and deploy (or only connect with --check)"""
    profile = resolve_network_profile(env)
    artifacts = ArtifactStore(args.artifacts or env.get('ARTIFACTS_DIR') or 'artifacts')

    if args.check:
        chain = ChainClient(profile, artifacts)
        print_banner(profile, chain)
        return None

    # Everything local is validated before the first RPC request
    params = resolve_deployment_parameters(env)
    if not profile.can_sign:
        raise SigningUnavailableError(profile.credential_status)
    artifacts.require(VAULT_CONTRACT, SALE_CONTRACT)

    chain = ChainClient(profile, artifacts)
    print_banner(profile, chain)
    return await CrowdsaleDeployer(params, chain).deploy()


def main(argv: Optional[Sequence[str]] = None, env: Optional[Mapping[str, str]] = None) -> int:
    """Entry point; returns the process exit code"""
    args = _parse_args(argv)
    if env is None:
        load_dotenv()
        env = os.environ

    logger = setup_logging(env.get('LOG_DIR') or 'logs', (env.get('DEBUG') or '').lower() == 'true')

    try:
        asyncio.run(run(args, env))
    except ConfigurationError as e:
        print(f"❌ CONFIGURATION ERROR: {e}", file=sys.stderr)
        logger.error(f"Configuration error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n👋 Deployment interrupted", file=sys.stderr)
        logger.error("Deployment interrupted by user")
        return 1
    except Exception as e:
        print(f"❌ {type(e).__name__}: {e}", file=sys.stderr)
        logger.error(f"Deployment failed: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
