"""
Base class for deployment modules.

A module declares the contracts it deploys and the calls it makes against a
Deployer. Parameters come from an Ignition-style parameters file:
{"<ModuleName>": {"<parameter>": <value>}}.
"""

import os
import json
import logging
from typing import Any, Dict, Optional

from web3 import Web3

from ..errors import ConfigurationError, ResourceNotFoundError

logger = logging.getLogger(__name__)


class Module:
    name = ""

    def __init__(self, parameters: Optional[Dict[str, Any]] = None):
        self.parameters = parameters or {}

    def get_parameter(self, name: str, default: Any = None) -> Any:
        return self.parameters.get(name, default)

    def build(self, deployer) -> Dict[str, Any]:
        raise NotImplementedError

    def run(self, deployer) -> Dict[str, Any]:
        logger.info(f"Running module {self.name} on {deployer.network.name}")
        try:
            result = self.build(deployer)
        except Exception as e:
            logger.error(f"Module {self.name} failed: {e}")
            raise
        logger.info(f"Module {self.name} complete")
        return result


def to_checksum(value: Any, source: str) -> str:
    """Normalise an address; lowercase and checksummed forms are both accepted"""
    if not isinstance(value, str) or not Web3.is_address(value):
        raise ConfigurationError(f"{source} is not a valid address: {value!r}")
    return Web3.to_checksum_address(value)

def load_parameters(path: Optional[str]) -> Dict[str, Dict[str, Any]]:
    if not path:
        return {}
    if not os.path.exists(path):
        raise ResourceNotFoundError(f"File not found: {path}")
    with open(path, 'r') as f:
        return json.load(f)
