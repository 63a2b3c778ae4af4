#!/usr/bin/env python3
"""
Command-line entry point for IOST deployments.

Usage:
    iost-deploy deploy IOSToken --network testnet [--parameters params.json]
    iost-deploy deploy Vesting --network testnet
    iost-deploy deploy IOSTokenVesting --network testnet [--schedules ignition/schedules.json]
    iost-deploy deploy all --network hardhat
    iost-deploy address IOSToken#IOSToken --network testnet
    iost-deploy networks
"""

import sys
import argparse
import logging
from typing import List, Optional

from web3.exceptions import Web3Exception

from .address_book import get_deployed_address
from .config import (
    DEFAULT_NETWORK,
    SOLIDITY_VERSION,
    etherscan_api_key,
    get_network,
    load_networks,
    setup_logging,
)
from .deployer import Deployer
from .errors import DeploymentError
from .modules import DEPLOYMENT_ORDER, get_module, load_parameters

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="iost-deploy", description="Deploy IOSToken and Vesting contracts")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    deploy = subparsers.add_parser("deploy", help="Run a deployment module")
    deploy.add_argument("module", choices=DEPLOYMENT_ORDER + ["all"])
    deploy.add_argument("--network", default=None, help=f"Target network (default: $DEPLOY_NETWORK or {DEFAULT_NETWORK})")
    deploy.add_argument("--parameters", default=None, help="JSON file of module parameters")
    deploy.add_argument("--schedules", default=None, help="Vesting schedules file for IOSTokenVesting")
    deploy.add_argument("--reset", action="store_true", help="Discard recorded entries of this module (all: the whole chain deployment)")
    deploy.add_argument("--yes", action="store_true", help="Skip the confirmation prompt on remote networks")

    address = subparsers.add_parser("address", help="Look up a deployed contract address")
    address.add_argument("key", help="Address book key, e.g. IOSToken#IOSToken")
    address.add_argument("--network", default=None)

    subparsers.add_parser("networks", help="List configured networks")
    return parser


def confirm(network) -> bool:
    answer = input(f"Confirm deploy to network {network.name} ({network.chain_id})? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def run_deploy(args) -> int:
    network = get_network(args.network)
    if not network.local and not args.yes and not confirm(network):
        print("Deployment cancelled")
        return 1

    parameters = load_parameters(args.parameters)
    if args.schedules:
        parameters.setdefault("IOSTokenVesting", {})["schedulesFile"] = args.schedules

    deployer = Deployer(network)
    names = DEPLOYMENT_ORDER if args.module == "all" else [args.module]
    if args.reset and args.module == "all":
        deployer.address_book.reset()
    elif args.reset:
        deployer.address_book.forget_module(args.module)

    for name in names:
        get_module(name, parameters).run(deployer)

    print(f"\n{'='*60}")
    print(f"Deployment results ({network.name}, chain {network.chain_id})")
    print(f"{'='*60}")
    for future_id, value in deployer.results.items():
        print(f"{future_id} - {value}")
    return 0


def run_address(args) -> int:
    print(get_deployed_address(args.key, get_network(args.network)))
    return 0


def run_networks(args) -> int:
    for network in load_networks().values():
        print(f"{network.name}: chain {network.chain_id} at {network.url}")
    print(f"solidity {SOLIDITY_VERSION}, explorer API key {'set' if etherscan_api_key() else 'not set'}")
    return 0


COMMANDS = {
    "deploy": run_deploy,
    "address": run_address,
    "networks": run_networks,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        return COMMANDS[args.command](args)
    except (DeploymentError, Web3Exception, ValueError) as e:
        # ValueError covers corrupt JSON files and malformed transaction fields
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Deployment stopped by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
