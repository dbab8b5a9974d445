"""Token contract ABIs and compiled deployment artifacts."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from rootstock_mcp.rootstock_api.abi import Fragment, normalize_abi

logger = logging.getLogger(__name__)

ARTIFACTS_PATH = Path(__file__).parent / "artifacts"

ERC20_ABI = [
    "function name() view returns (string)",
    "function symbol() view returns (string)",
    "function decimals() view returns (uint8)",
    "function totalSupply() view returns (uint256)",
    "function balanceOf(address owner) view returns (uint256)",
    "function allowance(address owner, address spender) view returns (uint256)",
    "function transfer(address to, uint256 amount) returns (bool)",
    "function approve(address spender, uint256 amount) returns (bool)",
    "function transferFrom(address from, address to, uint256 amount) returns (bool)",
]

MINTABLE_ERC20_ABI = ERC20_ABI + [
    "function mint(address to, uint256 amount)",
    "function burn(uint256 amount)",
    "function burnFrom(address account, uint256 amount)",
    "function owner() view returns (address)",
    "function renounceOwnership()",
    "function transferOwnership(address newOwner)",
]

ERC721_ABI = [
    "function name() view returns (string)",
    "function symbol() view returns (string)",
    "function tokenURI(uint256 tokenId) view returns (string)",
    "function totalSupply() view returns (uint256)",
    "function balanceOf(address owner) view returns (uint256)",
    "function ownerOf(uint256 tokenId) view returns (address)",
    "function getApproved(uint256 tokenId) view returns (address)",
    "function isApprovedForAll(address owner, address operator) view returns (bool)",
    "function approve(address to, uint256 tokenId)",
    "function setApprovalForAll(address operator, bool approved)",
    "function transferFrom(address from, address to, uint256 tokenId)",
    "function safeTransferFrom(address from, address to, uint256 tokenId)",
]

MINTABLE_ERC721_ABI = ERC721_ABI + [
    "function mint(address to, uint256 tokenId, string tokenURI)",
    "function owner() view returns (address)",
    "function renounceOwnership()",
    "function transferOwnership(address newOwner)",
]

ERC20_FRAGMENTS: List[Fragment] = normalize_abi(ERC20_ABI)
MINTABLE_ERC20_FRAGMENTS: List[Fragment] = normalize_abi(MINTABLE_ERC20_ABI)
ERC721_FRAGMENTS: List[Fragment] = normalize_abi(ERC721_ABI)
MINTABLE_ERC721_FRAGMENTS: List[Fragment] = normalize_abi(MINTABLE_ERC721_ABI)

ARTIFACT_FILES = {
    ("erc20", False): "StandardERC20.json",
    ("erc20", True): "MintableERC20.json",
    ("erc721", False): "SimpleERC721.json",
    ("erc721", True): "MintableERC721.json",
}


class ContractArtifactError(Exception):
    """Raised when a compiled contract artifact is missing or malformed."""


@dataclass(slots=True)
class ContractArtifact:
    name: str
    abi: List[Fragment]
    bytecode: str


def _read_artifact(path: Path) -> Dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ContractArtifactError(f"Could not read contract artifact {path.name}: {exc}") from exc


def load_artifact(kind: str, mintable: bool, *, artifacts_dir: Optional[str] = None) -> ContractArtifact:
    """
    Load the compiled artifact for an ERC20/ERC721 template.

    Files in ``artifacts_dir`` (Hardhat ``{abi, bytecode}`` JSON) take
    precedence over the ones bundled with the package.
    """
    filename = ARTIFACT_FILES.get((kind, bool(mintable)))
    if filename is None:
        raise ContractArtifactError(f"Unknown contract template: {kind}")

    search = [Path(artifacts_dir)] if artifacts_dir else []
    search.append(ARTIFACTS_PATH)
    for directory in search:
        path = directory / filename
        if path.is_file():
            payload = _read_artifact(path)
            break
    else:
        raise ContractArtifactError(
            f"Compiled artifact {filename} not found. "
            "Build the contracts and point ROOTSTOCK_ARTIFACTS_DIR at the output."
        )

    bytecode = payload.get("bytecode")
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object")
    if not isinstance(bytecode, str) or len(bytecode) <= 2:
        raise ContractArtifactError(f"Artifact {filename} has no bytecode.")
    abi = payload.get("abi")
    if not isinstance(abi, list):
        raise ContractArtifactError(f"Artifact {filename} has no ABI.")

    logger.debug("Loaded contract artifact %s from %s", filename, path.parent)
    return ContractArtifact(
        name=str(payload.get("contractName") or filename.removesuffix(".json")),
        abi=normalize_abi(abi),
        bytecode=bytecode if bytecode.startswith("0x") else f"0x{bytecode}",
    )
