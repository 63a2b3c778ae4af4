"""
Network profiles and logging setup for IOST deployments
"""

import os
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

SOLIDITY_VERSION = "0.8.27"
DEFAULT_NETWORK = "hardhat"
GAS_PRICE = 20000000000  # 20 gwei

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = 'deployment.log'


@dataclass(frozen=True)
class NetworkProfile:
    """Static description of a deployment target"""
    name: str
    url: str
    chain_id: Optional[int]
    gas_price: Optional[int] = None  # None lets the node price transactions
    accounts: Tuple[str, ...] = ()  # signing private keys
    poa: bool = False
    local: bool = False  # signs with the node's unlocked accounts


def _private_keys() -> Tuple[str, ...]:
    private_key = os.getenv("PRIVATE_KEY")
    return (private_key,) if private_key else ()


def load_networks() -> Dict[str, NetworkProfile]:
    """Build the network profiles from static values and the environment"""
    accounts = _private_keys()
    return {
        "hardhat": NetworkProfile(
            name="hardhat",
            url=os.getenv("LOCAL_RPC_URL", "http://127.0.0.1:8545"),
            chain_id=31337,
            local=True,
        ),
        "testnet": NetworkProfile(
            name="testnet",
            url="https://bsc-testnet.public.blastapi.io",
            chain_id=97,
            gas_price=GAS_PRICE,
            accounts=accounts,
            poa=True,
        ),
        "mainnet": NetworkProfile(
            name="mainnet",
            url="https://bsc-dataseed.binance.org/",
            chain_id=56,
            gas_price=GAS_PRICE,
            accounts=accounts,
            poa=True,
        ),
    }


def get_network(name: Optional[str] = None) -> NetworkProfile:
    """
    Look up a network profile by name.

    Falls back to the DEPLOY_NETWORK environment variable, then to the local
    hardhat node.
    """
    name = name or os.getenv("DEPLOY_NETWORK", DEFAULT_NETWORK)
    networks = load_networks()
    if name not in networks:
        raise ConfigurationError(
            f"Unknown network '{name}'. Available: {', '.join(networks)}"
        )
    return networks[name]


def etherscan_api_key() -> str:
    return os.getenv("ETHERSCAN_API_KEY", "")


def setup_logging(level=logging.INFO, log_file: Optional[str] = LOG_FILE):
    """Configure root logging to stderr and, optionally, a log file"""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
