#!/usr/bin/env python3
"""
Tests for the per-chain address book and deployed address lookup
"""

import os
import json
import pytest
from unittest.mock import patch

from iost_deploy.address_book import (
    AddressBook,
    address_book_path,
    future_key,
    get_deployed_address,
)
from iost_deploy.config import NetworkProfile
from iost_deploy.errors import (
    AddressBookNotFoundError,
    AddressNotFoundError,
    ConfigurationError,
    DeploymentError,
)

TOKEN_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
VESTING_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
TESTNET = NetworkProfile(name="testnet", url="http://localhost:8545", chain_id=97)


def write_address_book(root, chain_id, addresses):
    path = address_book_path(chain_id, str(root))
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w') as f:
        json.dump(addresses, f)
    return path


class TestAddressBookPath:
    """Test where each chain keeps its address book"""

    def test_path_is_derived_from_chain_id(self, tmp_path):
        """Test the address book path is built from the chain id"""
        path = address_book_path(97, str(tmp_path))
        assert path == os.path.join(str(tmp_path), "ignition", "deployments", "chain-97", "deployed_addresses.json")

    def test_future_key(self):
        """Test module and contract names are joined with '#'"""
        assert future_key("IOSToken", "IOSToken") == "IOSToken#IOSToken"

    def test_missing_chain_id_is_a_configuration_error(self, tmp_path):
        """Test a network without a chain id is a configuration error"""
        network = NetworkProfile(name="nochain", url="http://localhost:8545", chain_id=None)
        with pytest.raises(ConfigurationError, match="Chain ID not found in network configuration"):
            AddressBook.for_network(network, str(tmp_path))


class TestAddressBookLookup:
    """Lookups are read-only and fail loudly"""

    def test_resolves_recorded_address(self, tmp_path):
        """Test a recorded address is returned"""
        write_address_book(tmp_path, 97, {"IOSToken#IOSToken": TOKEN_ADDRESS})
        book = AddressBook.for_network(TESTNET, str(tmp_path))
        assert book.get("IOSToken#IOSToken") == TOKEN_ADDRESS

    def test_missing_file_fails_before_parsing(self, tmp_path):
        """Test a missing address book fails before any JSON parse"""
        book = AddressBook.for_network(TESTNET, str(tmp_path))
        with patch('iost_deploy.address_book.json.load') as mock_load:
            with pytest.raises(AddressBookNotFoundError, match="File not found"):
                book.get("IOSToken#IOSToken")
            mock_load.assert_not_called()

    def test_missing_file_error_is_a_file_not_found_error(self, tmp_path):
        """Test the missing-file error is also a FileNotFoundError"""
        book = AddressBook(address_book_path(56, str(tmp_path)))
        with pytest.raises(FileNotFoundError):
            book.get("IOSToken#IOSToken")

    def test_missing_key(self, tmp_path):
        """Test an absent key raises a lookup error naming key and file"""
        path = write_address_book(tmp_path, 97, {"Vesting#Vesting": VESTING_ADDRESS})
        book = AddressBook(path)
        with pytest.raises(AddressNotFoundError) as exc_info:
            book.get("IOSToken#IOSToken")

        assert isinstance(exc_info.value, KeyError)
        assert isinstance(exc_info.value, DeploymentError)
        assert str(exc_info.value) == f'"IOSToken#IOSToken" not found in JSON file: {path}'

    @pytest.mark.parametrize("value", ["", None])
    def test_empty_value_counts_as_missing(self, tmp_path, value):
        """Test empty and null addresses count as not deployed"""
        path = write_address_book(tmp_path, 97, {"IOSToken#IOSToken": value})
        with pytest.raises(AddressNotFoundError):
            AddressBook(path).get("IOSToken#IOSToken")

    def test_lookup_does_not_modify_file(self, tmp_path):
        """Test repeated lookups return the same value and leave the file untouched"""
        path = write_address_book(tmp_path, 97, {"IOSToken#IOSToken": TOKEN_ADDRESS})
        with open(path) as f:
            before = f.read()

        book = AddressBook(path)
        assert book.get("IOSToken#IOSToken") == book.get("IOSToken#IOSToken")

        with open(path) as f:
            assert f.read() == before

    def test_contains(self, tmp_path):
        """Test membership only counts non-empty entries"""
        book = AddressBook(address_book_path(97, str(tmp_path)))
        assert "IOSToken#IOSToken" not in book

        write_address_book(tmp_path, 97, {"IOSToken#IOSToken": TOKEN_ADDRESS, "Vesting#Vesting": ""})
        assert "IOSToken#IOSToken" in book
        assert "Vesting#Vesting" not in book


class TestAddressBookRecord:
    """Test writing and clearing recorded addresses"""

    def test_record_creates_file(self, tmp_path):
        """Test recording into a missing address book creates it"""
        book = AddressBook.for_network(TESTNET, str(tmp_path))
        book.record("IOSToken#IOSToken", TOKEN_ADDRESS)

        with open(book.path) as f:
            assert json.load(f) == {"IOSToken#IOSToken": TOKEN_ADDRESS}

    def test_record_keeps_existing_entries_in_order(self, tmp_path):
        """Test recording appends without reordering existing entries"""
        path = write_address_book(tmp_path, 97, {"IOSToken#IOSToken": TOKEN_ADDRESS})
        book = AddressBook(path)
        book.record("Vesting#Vesting", VESTING_ADDRESS)

        assert list(book.load().items()) == [
            ("IOSToken#IOSToken", TOKEN_ADDRESS),
            ("Vesting#Vesting", VESTING_ADDRESS),
        ]

    def test_reset_removes_chain_directory(self, tmp_path):
        """Test reset removes the chain's deployment directory"""
        path = write_address_book(tmp_path, 97, {"IOSToken#IOSToken": TOKEN_ADDRESS})
        book = AddressBook(path)
        book.reset()

        assert not os.path.exists(os.path.dirname(path))
        assert not book.exists()

    def test_reset_without_deployment_is_noop(self, tmp_path):
        """Test reset on a fresh chain does nothing"""
        AddressBook(address_book_path(97, str(tmp_path))).reset()

    def test_forget_module_drops_only_its_entries(self, tmp_path):
        """Test forgetting a module keeps entries recorded by other modules"""
        path = write_address_book(tmp_path, 97, {
            "IOSToken#IOSToken": TOKEN_ADDRESS,
            "Vesting#Vesting": VESTING_ADDRESS,
            "IOSTokenVesting#Vesting": VESTING_ADDRESS,
        })
        book = AddressBook(path)
        book.forget_module("IOSTokenVesting")

        assert book.load() == {"IOSToken#IOSToken": TOKEN_ADDRESS, "Vesting#Vesting": VESTING_ADDRESS}
        assert "IOSTokenVesting#Vesting" not in book

    def test_forget_module_matches_whole_module_name(self, tmp_path):
        """Test forgetting IOSToken leaves IOSTokenVesting entries in place"""
        path = write_address_book(tmp_path, 97, {
            "IOSToken#IOSToken": TOKEN_ADDRESS,
            "IOSTokenVesting#Vesting": VESTING_ADDRESS,
        })
        book = AddressBook(path)
        book.forget_module("IOSToken")

        assert book.load() == {"IOSTokenVesting#Vesting": VESTING_ADDRESS}

    def test_forget_module_without_deployment_is_noop(self, tmp_path):
        """Test forgetting a module on a fresh chain creates no file"""
        book = AddressBook(address_book_path(97, str(tmp_path)))
        book.forget_module("IOSToken")
        assert not book.exists()


class TestGetDeployedAddress:
    """Test resolving addresses on the active network"""

    def test_uses_given_network(self, tmp_path):
        """Test lookup against an explicit network"""
        write_address_book(tmp_path, 97, {"IOSToken#IOSToken": TOKEN_ADDRESS})
        assert get_deployed_address("IOSToken#IOSToken", TESTNET, str(tmp_path)) == TOKEN_ADDRESS

    def test_uses_active_network_from_environment(self, tmp_path, monkeypatch):
        """Test lookup against the DEPLOY_NETWORK network"""
        monkeypatch.setenv("DEPLOY_NETWORK", "mainnet")
        write_address_book(tmp_path, 56, {"Vesting#Vesting": VESTING_ADDRESS})
        assert get_deployed_address("Vesting#Vesting", root=str(tmp_path)) == VESTING_ADDRESS

    def test_other_chain_is_not_consulted(self, tmp_path, monkeypatch):
        """Test another chain's address book is never used"""
        monkeypatch.setenv("DEPLOY_NETWORK", "mainnet")
        write_address_book(tmp_path, 97, {"Vesting#Vesting": VESTING_ADDRESS})
        with pytest.raises(AddressBookNotFoundError):
            get_deployed_address("Vesting#Vesting", root=str(tmp_path))
