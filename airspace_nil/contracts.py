"""
Contract interfaces and Hardhat artifact loading.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Any, List, Union

from .exceptions import ContractArtifactError

logger = logging.getLogger(__name__)

NFT_CONTRACT_NAME = "AirSpaceNFT"
TRANSFER_CONTRACT_NAME = "AirSpaceTransfer"

# ABI for the AirSpaceNFT contract (functions used by the tooling)
AIRSPACE_NFT_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "string", "name": "tokenURI", "type": "string"}
        ],
        "name": "mint",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "tokenId", "type": "uint256"}],
        "name": "ownerOf",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "tokenId", "type": "uint256"}],
        "name": "tokenURI",
        "outputs": [{"internalType": "string", "name": "", "type": "string"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "address", "name": "from", "type": "address"},
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "uint256", "name": "tokenId", "type": "uint256"}
        ],
        "name": "transferFrom",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "address", "name": "to", "type": "address"},
            {"internalType": "uint256", "name": "tokenId", "type": "uint256"}
        ],
        "name": "approve",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]

# ABI for the AirSpaceTransfer relay contract
AIRSPACE_TRANSFER_ABI: List[Dict[str, Any]] = [
    {
        "inputs": [],
        "name": "RECIPIENT",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function"
    },
    {
        "inputs": [],
        "name": "transferNIL",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "address", "name": "nftContract", "type": "address"},
            {"internalType": "uint256", "name": "tokenId", "type": "uint256"}
        ],
        "name": "transferNFT",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "address", "name": "nftContract", "type": "address"},
            {"internalType": "uint256", "name": "tokenId", "type": "uint256"}
        ],
        "name": "transferBoth",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function"
    },
    {
        "inputs": [{"internalType": "uint256", "name": "amount", "type": "uint256"}],
        "name": "withdrawNIL",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"internalType": "address", "name": "nftContract", "type": "address"},
            {"internalType": "uint256", "name": "tokenId", "type": "uint256"}
        ],
        "name": "withdrawNFT",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {"stateMutability": "payable", "type": "receive"}
]


def artifact_path(artifacts_dir: Union[str, Path], contract_name: str) -> Path:
    """Hardhat layout: <artifacts>/contracts/<Name>.sol/<Name>.json"""
    return Path(artifacts_dir) / "contracts" / f"{contract_name}.sol" / f"{contract_name}.json"


def load_artifact(artifacts_dir: Union[str, Path], contract_name: str) -> Dict[str, Any]:
    """
    Load the ABI and bytecode of a compiled contract.

    Args:
        artifacts_dir: Hardhat artifacts directory
        contract_name: Contract name (e.g., "AirSpaceNFT")

    Returns:
        Dictionary with "abi" and "bytecode"

    Raises:
        ContractArtifactError: If the artifact is missing or malformed
    """
    path = artifact_path(artifacts_dir, contract_name)
    try:
        with open(path, "r", encoding="utf-8") as f:
            artifact = json.load(f)
    except FileNotFoundError:
        raise ContractArtifactError(
            f"Artifact for {contract_name} not found at {path}. Compile the contracts first."
        )
    except json.JSONDecodeError as e:
        raise ContractArtifactError(f"Invalid artifact JSON at {path}: {e}")

    abi = artifact.get("abi")
    bytecode = artifact.get("bytecode")
    if not isinstance(abi, list) or not bytecode or bytecode == "0x":
        raise ContractArtifactError(f"Artifact at {path} has no abi/bytecode")

    logger.debug(f"Loaded {contract_name} artifact from {path}")
    return {"abi": abi, "bytecode": bytecode}
