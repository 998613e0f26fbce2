"""
Account provisioning: create a smart account and fund it from the faucet.
"""
import logging
import re
from typing import Callable, Optional

from eth_account import Account

from .client import NilClient
from .config import ConfigStore, NilConfig, DEFAULT_RPC_URL, DEFAULT_SHARD_ID
from .exceptions import FaucetError
from .faucet import FaucetClient, DEFAULT_TOKEN
from .models import ProvisioningReport, SmartAccount
from .prompts import InputProvider

DEFAULT_TOP_UP_AMOUNT = 1000000

logger = logging.getLogger(__name__)


def generate_smart_account(shard_id: str) -> SmartAccount:
    """Generate a fresh keypair bound to a shard."""
    account = Account.create()
    return SmartAccount(
        address=account.address,
        private_key='0x' + bytes(account.key).hex(),
        shard_id=shard_id,
    )


def resolve_shard_id(config: NilConfig, store: ConfigStore, inputs: InputProvider) -> str:
    """
    Use the configured shard or ask for one.

    A prompted answer that is empty or not numeric falls back to the default
    shard. The chosen value is persisted.
    """
    if config.shard_id:
        return config.shard_id

    answer = inputs.ask("Enter the shard ID to use (e.g., 1, 2, 3, etc.)")
    if not re.fullmatch(r"[0-9]+", answer or ""):
        logger.info(f"No valid shard ID provided. Using default shard ID: {DEFAULT_SHARD_ID}")
        answer = DEFAULT_SHARD_ID
    store.upsert("NIL_SHARD_ID", answer)
    return answer


def parse_top_up_amount(answer: str) -> int:
    """Positive integer amount, or the default when the answer is unusable."""
    try:
        amount = int(answer.strip())
    except (ValueError, AttributeError):
        amount = 0
    if amount <= 0:
        logger.info(f"Invalid amount. Using default amount: {DEFAULT_TOP_UP_AMOUNT}")
        return DEFAULT_TOP_UP_AMOUNT
    return amount


def provision_account(
    config: NilConfig,
    store: ConfigStore,
    inputs: InputProvider,
    faucet: Optional[FaucetClient] = None,
    client_factory: Optional[Callable[..., NilClient]] = None
) -> ProvisioningReport:
    """
    Create a smart account, persist it and top it up from the faucet.

    The account is written to the configuration as soon as it exists. If
    funding fails afterwards, the unfunded account stays configured.

    Args:
        config: Current configuration
        store: Store that receives NIL_SHARD_ID, NIL_WALLET_ADDRESS and PRIVATE_KEY
        inputs: Source of interactive answers
        faucet: Faucet client (defaults to one for config.faucet_url)
        client_factory: Builds the RPC client (defaults to NilClient)

    Returns:
        ProvisioningReport with balances before and after the top-up

    Raises:
        FaucetError: If the faucet does not fund the account
    """
    rpc_url = config.rpc_url or DEFAULT_RPC_URL
    shard_id = resolve_shard_id(config, store, inputs)
    faucet = faucet or FaucetClient(config.faucet_url)
    client_factory = client_factory or NilClient

    logger.info(f"Using RPC endpoint: {rpc_url}")
    logger.info(f"Using faucet endpoint: {faucet.faucet_url}")
    logger.info(f"Using shard ID: {shard_id}")

    logger.info("Creating a new smart account...")
    account = generate_smart_account(shard_id)
    logger.info(f"Smart account created: {account.address}")
    store.upsert_many({
        "NIL_WALLET_ADDRESS": account.address,
        "PRIVATE_KEY": account.private_key,
    })

    client = client_factory(rpc_url=rpc_url, private_key=account.private_key, shard_id=shard_id)

    balance_before = client.get_tokens(account.address)
    logger.info(f"Token balance before top-up: {balance_before}")

    token = inputs.ask("Enter the token to top up (NIL, BTC, USDC, etc.)")
    if not token:
        logger.info(f"No token specified. Using default token: {DEFAULT_TOKEN}")
        token = DEFAULT_TOKEN
    amount = parse_top_up_amount(inputs.ask(f"Enter the amount to top up (e.g., {DEFAULT_TOP_UP_AMOUNT})"))

    logger.info(f"Topping up account with {amount} {token}...")
    if not faucet.request_tokens(account.address, token, amount):
        raise FaucetError(
            f"Faucet did not fund {account.address} with {amount} {token}. "
            "The account is saved; top it up later."
        )

    balance_after = client.get_tokens(account.address)
    logger.info(f"Token balance after top-up: {balance_after}")

    return ProvisioningReport(
        account=account,
        token=token,
        amount=amount,
        balance_before=balance_before,
        balance_after=balance_after,
    )
