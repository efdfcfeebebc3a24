"""
Loads compiled contract artifacts from Hardhat build output
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

from ..errors import ArtifactNotFoundError

VAULT_CONTRACT = 'DTRAVestingVault'
SALE_CONTRACT = 'DTRACrowdsale'


@dataclass(frozen=True)
class ContractArtifact:
    """ABI and creation bytecode for one contract"""
    name: str
    abi: List[Dict[str, Any]] = field(repr=False)
    bytecode: str = field(repr=False)
    source_path: str = ''


class ArtifactStore:
    """Finds artifacts under an ``artifacts/`` directory by contract name"""

    def __init__(self, artifacts_dir: Union[str, Path] = 'artifacts'):
        self.artifacts_dir = Path(artifacts_dir)
        self.logger = logging.getLogger('dtra_deployer')
        self._cache: Dict[str, ContractArtifact] = {}

    def _find(self, name: str) -> Path:
        if not self.artifacts_dir.is_dir():
            raise ArtifactNotFoundError(
                f"Artifacts directory not found at {self.artifacts_dir}. Run `npx hardhat compile` first."
            )

        # Hardhat layout: artifacts/contracts/<File>.sol/<Name>.json
        matches = sorted(self.artifacts_dir.rglob(f"{name}.json"))
        if not matches:
            raise ArtifactNotFoundError(f"No artifact for {name} under {self.artifacts_dir}")
        if len(matches) > 1:
            self.logger.warning(f"Multiple artifacts for {name}, using {matches[0]}")
        return matches[0]

    def load(self, name: str) -> ContractArtifact:
        """Return the artifact for ``name``, reading it from disk on first use"""
        if name in self._cache:
            return self._cache[name]

        path = self._find(name)
        try:
            data = json.loads(path.read_text(encoding='utf-8'))
        except json.JSONDecodeError as e:
            raise ArtifactNotFoundError(f"Artifact {path} is not valid JSON: {e}")

        abi = data.get('abi')
        bytecode = data.get('bytecode') or ''
        if not abi or bytecode in ('', '0x'):
            # Interfaces and abstract contracts have no creation code
            raise ArtifactNotFoundError(f"Artifact {path} is missing abi/bytecode")

        artifact = ContractArtifact(name=name, abi=abi, bytecode=bytecode, source_path=str(path))
        self._cache[name] = artifact
        self.logger.debug(f"Loaded artifact {name} from {path}")
        return artifact

    def require(self, *names: str) -> List[ContractArtifact]:
        """Load every named artifact so missing ones fail before any transaction"""
        return [self.load(name) for name in names]
