"""
AirSpace =nil; - account, contract, minting and transfer tooling for the
=nil; test network.
"""
from .client import NilClient
from .config import ConfigStore, NilConfig
from .deployer import deploy_contract, deploy_nft_contract, deploy_transfer_contract, ensure_funded
from .exceptions import (
    AirSpaceError, ConfigError, MissingConfigError, ContractArtifactError, FaucetError,
    RpcError, TransactionError, PartialTransferError, OwnershipError, InvalidInputError
)
from .faucet import FaucetClient
from .keys import configure_shard, extract_private_key
from .minting import mint_listings
from .models import TxReceipt, SmartAccount, NftMetadata, MintResult, TransferSummary, ProvisioningReport
from .prompts import InputProvider, ConsoleInputProvider
from .provisioner import provision_account
from .shard import ShardedHTTPProvider, decorate_request
from .transfer import transfer_nft, transfer_nil_and_nft, recover_from_relay
from .version import __version__

__all__ = [
    "NilClient",
    "ConfigStore",
    "NilConfig",
    "FaucetClient",
    "ShardedHTTPProvider",
    "decorate_request",
    "InputProvider",
    "ConsoleInputProvider",
    "provision_account",
    "configure_shard",
    "extract_private_key",
    "deploy_contract",
    "deploy_nft_contract",
    "deploy_transfer_contract",
    "ensure_funded",
    "mint_listings",
    "transfer_nft",
    "transfer_nil_and_nft",
    "recover_from_relay",
    "TxReceipt",
    "SmartAccount",
    "NftMetadata",
    "MintResult",
    "TransferSummary",
    "ProvisioningReport",
    "AirSpaceError",
    "ConfigError",
    "MissingConfigError",
    "ContractArtifactError",
    "FaucetError",
    "RpcError",
    "TransactionError",
    "PartialTransferError",
    "OwnershipError",
    "InvalidInputError",
    "__version__",
]
