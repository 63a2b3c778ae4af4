"""
Per-chain address book of deployed contracts.

The file lives at ignition/deployments/chain-<chainId>/deployed_addresses.json
and maps "<ModuleName>#<ContractName>" to the contract address.
"""

import os
import json
import shutil
import logging
from typing import Dict, Optional

from .config import NetworkProfile, get_network
from .errors import AddressBookNotFoundError, AddressNotFoundError, ConfigurationError

logger = logging.getLogger(__name__)

DEPLOYMENTS_DIR = os.path.join("ignition", "deployments")
ADDRESS_BOOK_FILE = "deployed_addresses.json"


def future_key(module_name: str, contract_name: str) -> str:
    return f"{module_name}#{contract_name}"


def address_book_path(chain_id: int, root: Optional[str] = None) -> str:
    """Path of the address book for a chain, relative to the project root"""
    root = root if root is not None else os.getcwd()
    return os.path.join(root, DEPLOYMENTS_DIR, f"chain-{chain_id}", ADDRESS_BOOK_FILE)


class AddressBook:
    """Key-value store of deployed addresses for a single chain"""

    def __init__(self, path: str):
        self.path = path

    @classmethod
    def for_network(cls, network: NetworkProfile, root: Optional[str] = None) -> "AddressBook":
        if not network.chain_id:
            raise ConfigurationError("Chain ID not found in network configuration.")
        return cls(address_book_path(network.chain_id, root))

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def load(self) -> Dict[str, str]:
        if not self.exists():
            raise AddressBookNotFoundError(f"File not found: {self.path}")
        with open(self.path, 'r') as f:
            return json.load(f)

    def get(self, key: str) -> str:
        """Resolve the address recorded under key"""
        addresses = self.load()
        address = addresses.get(key)
        # Empty strings and nulls count as "not deployed"
        if not address:
            raise AddressNotFoundError(key, self.path)
        return address

    def __contains__(self, key: str) -> bool:
        if not self.exists():
            return False
        return bool(self.load().get(key))

    def record(self, key: str, address: str):
        """Persist an address, keeping existing entries in their original order"""
        addresses = self.load() if self.exists() else {}
        addresses[key] = address
        os.makedirs(os.path.dirname(self.path), exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(addresses, f, indent=2)
        logger.info(f"Recorded {key} at {address} in {self.path}")

    def forget_module(self, module_name: str):
        """Drop every entry recorded by one module"""
        if not self.exists():
            return
        prefix = f"{module_name}#"
        addresses = self.load()
        kept = {key: value for key, value in addresses.items() if not key.startswith(prefix)}
        if len(kept) == len(addresses):
            return
        with open(self.path, 'w') as f:
            json.dump(kept, f, indent=2)
        logger.warning(f"Removed {module_name} entries from {self.path}")

    def reset(self):
        """Remove the whole deployment directory for this chain"""
        deployment_dir = os.path.dirname(self.path)
        if os.path.isdir(deployment_dir):
            shutil.rmtree(deployment_dir)
            logger.warning(f"Removed previous deployment at {deployment_dir}")


def get_deployed_address(key: str, network: Optional[NetworkProfile] = None,
                         root: Optional[str] = None) -> str:
    """Resolve a deployed address on the active network"""
    network = network or get_network()
    return AddressBook.for_network(network, root).get(key)
