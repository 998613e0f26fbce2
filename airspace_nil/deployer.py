"""
Contract deployment and the low-balance faucet top-up it relies on.
"""
import time
import logging
from typing import Callable, Optional

from web3 import Web3

from .client import NilClient
from .config import ConfigStore, NilConfig
from .contracts import load_artifact, NFT_CONTRACT_NAME, TRANSFER_CONTRACT_NAME
from .faucet import FaucetClient
from .models import TxReceipt

LOW_BALANCE_THRESHOLD_WEI = 10**17  # 0.1 in ether units
FUNDING_WAIT_SECONDS = 10

logger = logging.getLogger(__name__)


def ensure_funded(
    client: NilClient,
    faucet: FaucetClient,
    threshold: int = LOW_BALANCE_THRESHOLD_WEI,
    wait_seconds: float = FUNDING_WAIT_SECONDS
) -> int:
    """
    Top up the operating account once if its balance is low.

    At most one faucet request is made: after it, the balance is re-checked
    after a fixed wait and whatever it is gets returned.

    Returns:
        Latest known balance in wei
    """
    balance = client.get_balance()
    logger.info(f"Account balance: {Web3.from_wei(balance, 'ether')} ETH")
    if balance >= threshold:
        return balance

    logger.info("Balance is low, requesting tokens from faucet...")
    faucet.request_tokens(client.address)

    logger.info("Waiting for tokens to be credited...")
    time.sleep(wait_seconds)

    balance = client.get_balance()
    logger.info(f"New account balance: {Web3.from_wei(balance, 'ether')} ETH")
    if balance < threshold:
        logger.warning("Balance is still low after the faucet request; continuing anyway")
    return balance


def deploy_contract(
    config: NilConfig,
    store: ConfigStore,
    contract_name: str,
    address_key: str,
    top_up: bool = True,
    faucet: Optional[FaucetClient] = None,
    client_factory: Optional[Callable[[NilConfig], NilClient]] = None
) -> TxReceipt:
    """
    Deploy a compiled contract and persist its address.

    Args:
        config: Current configuration
        store: Store that receives the deployed address
        contract_name: Hardhat artifact name
        address_key: Configuration key for the deployed address
        top_up: Request faucet funding once when the balance is low; when
            False a low balance is only reported
        faucet: Faucet client (defaults to one for config.faucet_url)
        client_factory: Builds the RPC client (defaults to NilClient.from_config)

    Returns:
        Deployment receipt

    Raises:
        MissingConfigError: If PRIVATE_KEY, NIL_TESTNET_URL or NIL_SHARD_ID is missing
        ContractArtifactError: If the compiled artifact is unavailable
        TransactionError: If the deployment fails; nothing is persisted then
    """
    client_factory = client_factory or NilClient.from_config
    client = client_factory(config)
    artifact = load_artifact(config.resolve_path(config.artifacts_dir), contract_name)

    logger.info(f"Using shard ID: {client.shard_id}")
    logger.info(f"Deploying {contract_name} with account: {client.address}")

    if top_up:
        ensure_funded(client, faucet or FaucetClient(config.faucet_url))
    else:
        balance = client.get_balance()
        logger.info(f"Account balance: {Web3.from_wei(balance, 'ether')} ETH")
        if balance < LOW_BALANCE_THRESHOLD_WEI:
            logger.warning("Low balance. You may need to top up your account.")

    logger.info(f"Deploying {contract_name} contract...")
    receipt = client.deploy(artifact["abi"], artifact["bytecode"])
    logger.info(f"{contract_name} deployed to: {receipt.contract_address}")

    store.upsert(address_key, receipt.contract_address)
    return receipt


def deploy_nft_contract(config: NilConfig, store: ConfigStore, **kwargs) -> TxReceipt:
    """Deploy AirSpaceNFT and save NFT_CONTRACT_ADDRESS"""
    return deploy_contract(config, store, NFT_CONTRACT_NAME, "NFT_CONTRACT_ADDRESS", top_up=True, **kwargs)


def deploy_transfer_contract(config: NilConfig, store: ConfigStore, **kwargs) -> TxReceipt:
    """Deploy the AirSpaceTransfer relay and save TRANSFER_CONTRACT_ADDRESS"""
    return deploy_contract(
        config, store, TRANSFER_CONTRACT_NAME, "TRANSFER_CONTRACT_ADDRESS", top_up=False, **kwargs
    )
