"""
Loads compiled contract artifacts (ABI and bytecode).

Both Hardhat (artifacts/contracts/<Name>.sol/<Name>.json) and Foundry
(out/<Name>.sol/<Name>.json) layouts are supported.
"""

import os
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .errors import ArtifactNotFoundError

ARTIFACT_DIRS = (os.path.join("artifacts", "contracts"), "out")


@dataclass(frozen=True)
class ContractArtifact:
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str


class ArtifactStore:
    def __init__(self, root: Optional[str] = None):
        self.root = root if root is not None else os.getcwd()

    def find(self, contract_name: str) -> str:
        for artifact_dir in ARTIFACT_DIRS:
            path = os.path.join(self.root, artifact_dir, f"{contract_name}.sol", f"{contract_name}.json")
            if os.path.exists(path):
                return path
        raise ArtifactNotFoundError(
            f"No compiled artifact for {contract_name} under {self.root}. Compile the contracts first."
        )

    def load(self, contract_name: str) -> ContractArtifact:
        path = self.find(contract_name)
        with open(path, 'r') as f:
            data = json.load(f)

        bytecode = data.get('bytecode', '')
        # Foundry nests the bytecode under "object"
        if isinstance(bytecode, dict):
            bytecode = bytecode.get('object', '')

        return ContractArtifact(name=contract_name, abi=data['abi'], bytecode=bytecode)
