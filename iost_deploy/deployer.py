"""
Web3-backed executor for deployment modules.

Each deployment, contract attachment and call is identified by a future id,
e.g. "IOSToken#IOSToken". Deployed addresses are persisted in the address book
so later modules (and later runs) can find them.
"""

import logging
from typing import Any, Dict, List, Optional

from web3 import Web3
from web3.logs import DISCARD
from web3.middleware import ExtraDataToPOAMiddleware

from .address_book import AddressBook, future_key
from .artifacts import ArtifactStore
from .config import NetworkProfile
from .errors import (
    ConfigurationError,
    DeploymentError,
    EventNotFoundError,
    TransactionFailedError,
)

logger = logging.getLogger(__name__)


class Deployer:
    def __init__(self, network: NetworkProfile, address_book: Optional[AddressBook] = None,
                 artifacts: Optional[ArtifactStore] = None, w3: Optional[Web3] = None,
                 root: Optional[str] = None):
        self.network = network
        if not network.local and not network.accounts:
            raise ConfigurationError(f"PRIVATE_KEY not found in environment for network '{network.name}'")

        self.address_book = address_book or AddressBook.for_network(network, root)
        self.artifacts = artifacts or ArtifactStore(root)
        self.w3 = w3 if w3 is not None else self._initialize_web3()

        # signer address -> private key
        self._keys: Dict[str, str] = {}
        for private_key in network.accounts:
            account = self.w3.eth.account.from_key(private_key)
            self._keys[account.address] = private_key

        self.results: Dict[str, Any] = {}

    def _initialize_web3(self) -> Web3:
        """Connect to the network's RPC endpoint and verify the chain id"""
        w3 = Web3(Web3.HTTPProvider(self.network.url))
        if self.network.poa:
            w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

        if not w3.is_connected():
            raise DeploymentError(f"Could not connect to RPC URL: {self.network.url}")

        remote_chain_id = w3.eth.chain_id
        if remote_chain_id != self.network.chain_id:
            raise ConfigurationError(
                f"Network '{self.network.name}' is configured with chain id {self.network.chain_id}, "
                f"but the node at {self.network.url} reports {remote_chain_id}"
            )

        logger.info(f"Connected to {self.network.name} (chain {remote_chain_id}) at {self.network.url}")
        return w3

    @property
    def accounts(self) -> List[str]:
        if self._keys:
            return list(self._keys)
        return list(self.w3.eth.accounts)

    def get_account(self, index: int) -> str:
        accounts = self.accounts
        if index >= len(accounts):
            raise ConfigurationError(
                f"Account #{index} requested but network '{self.network.name}' has {len(accounts)} account(s)"
            )
        return accounts[index]

    def _tx_params(self, sender: str) -> Dict[str, Any]:
        return {
            'from': sender,
            'nonce': self.w3.eth.get_transaction_count(sender),
            'gasPrice': self.network.gas_price or self.w3.eth.gas_price,
            'chainId': self.network.chain_id,
        }

    def _send(self, transaction, sender: str, future_id: str):
        """Send a constructor or function transaction and wait for its receipt"""
        private_key = self._keys.get(sender)
        if private_key is None:
            # Node-managed account (local hardhat node)
            params: Dict[str, Any] = {'from': sender}
            if self.network.gas_price:
                params['gasPrice'] = self.network.gas_price
            tx_hash = transaction.transact(params)
        else:
            tx = transaction.build_transaction(self._tx_params(sender))
            signed_tx = self.w3.eth.account.sign_transaction(tx, private_key)
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)

        logger.info(f"{future_id}: transaction sent {Web3.to_hex(tx_hash)}")
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)

        if receipt['status'] != 1:
            logger.error(f"{future_id}: transaction {Web3.to_hex(tx_hash)} reverted")
            raise TransactionFailedError(f"{future_id}: transaction {Web3.to_hex(tx_hash)} reverted")

        logger.info(f"{future_id}: confirmed in block {receipt['blockNumber']}")
        return receipt

    def deploy(self, module_name: str, contract_name: str, args: List[Any], sender: Optional[str] = None):
        """
        Deploy a contract, or reuse the one already recorded under the same id.

        Returns a web3 contract instance bound to the deployed address.
        """
        key = future_key(module_name, contract_name)
        artifact = self.artifacts.load(contract_name)

        if key in self.address_book:
            address = self.address_book.get(key)
            logger.info(f"{key} already deployed at {address}, skipping")
            self.results[key] = address
            return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=artifact.abi)

        sender = sender or self.get_account(0)
        logger.info(f"Deploying {key} from {sender} with args {args}")

        factory = self.w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
        receipt = self._send(factory.constructor(*args), sender, key)
        address = receipt['contractAddress']

        self.address_book.record(key, address)
        self.results[key] = address
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=artifact.abi)

    def contract_at(self, module_name: str, contract_name: str, address: str):
        """Attach to an existing contract and record it under this module's id"""
        key = future_key(module_name, contract_name)
        artifact = self.artifacts.load(contract_name)
        checksum_address = Web3.to_checksum_address(address)

        if key not in self.address_book:
            self.address_book.record(key, checksum_address)
        self.results[key] = checksum_address
        return self.w3.eth.contract(address=checksum_address, abi=artifact.abi)

    def call(self, contract, function_name: str, args: List[Any], future_id: str,
             sender: Optional[str] = None):
        """Send a state-changing call and return its receipt"""
        sender = sender or self.get_account(0)
        logger.info(f"{future_id}: calling {function_name}{tuple(args)}")
        transaction = getattr(contract.functions, function_name)(*args)
        receipt = self._send(transaction, sender, future_id)
        self.results[future_id] = Web3.to_hex(receipt['transactionHash'])
        return receipt

    def read_event_argument(self, contract, receipt, event_name: str, argument: str,
                            future_id: str, event_index: int = 0):
        """Read one argument of an event emitted by contract in receipt"""
        event = getattr(contract.events, event_name)
        events = event().process_receipt(receipt, errors=DISCARD)
        if len(events) <= event_index:
            raise EventNotFoundError(
                f"{future_id}: event {event_name} #{event_index} not emitted in transaction "
                f"{Web3.to_hex(receipt['transactionHash'])}"
            )

        value = events[event_index]['args'][argument]
        self.results[future_id] = value
        return value
