"""
NFT transfers, the NIL + NFT relay transfer and relay recovery.
"""
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Callable, List, Optional, Tuple

from web3 import Web3

from .client import NilClient
from .config import NilConfig
from .contracts import AIRSPACE_NFT_ABI, AIRSPACE_TRANSFER_ABI
from .exceptions import ConfigError, InvalidInputError, OwnershipError, PartialTransferError
from .models import TransferSummary, TxReceipt
from .prompts import InputProvider, ask_until_valid

TRANSFER_CONFIRMATIONS = 2
RELAY_CONFIRMATIONS = 1
RELAY_AMOUNT_WEI = 10**18  # 1 NIL

logger = logging.getLogger(__name__)


def parse_token_id(answer: str) -> int:
    """Non-negative integer token id"""
    answer = (answer or "").strip()
    if not re.fullmatch(r"[0-9]+", answer):
        raise InvalidInputError(f"Invalid token ID: {answer!r}")
    return int(answer)


def parse_address(answer: str) -> str:
    """Checksummed address from user input"""
    answer = (answer or "").strip()
    if not Web3.is_address(answer):
        raise InvalidInputError(f"Invalid recipient address: {answer!r}")
    return Web3.to_checksum_address(answer)


def parse_nil_amount(answer: str) -> int:
    """Positive NIL amount (decimal allowed), returned in wei"""
    try:
        amount = Decimal((answer or "").strip())
    except InvalidOperation:
        raise InvalidInputError(f"Invalid amount: {answer!r}")
    if not amount.is_finite() or amount <= 0:
        raise InvalidInputError(f"Invalid amount: {answer!r}")
    return int(Web3.to_wei(amount, "ether"))


def check_ownership(nft_contract, token_id: int, address: str) -> str:
    """
    Make sure an address owns a token (read-only call).

    Returns:
        The owner address

    Raises:
        OwnershipError: If someone else owns the token
    """
    owner = nft_contract.functions.ownerOf(token_id).call()
    if owner.lower() != address.lower():
        raise OwnershipError(token_id, owner)
    logger.info(f"You are the owner of token ID {token_id}")
    return owner


def _default_factory(client_factory):
    return client_factory or NilClient.from_config


def transfer_nft(
    config: NilConfig,
    inputs: InputProvider,
    client_factory: Optional[Callable[[NilConfig], NilClient]] = None
) -> Optional[TransferSummary]:
    """
    Transfer an NFT owned by the operating account.

    Nothing is submitted unless the caller owns the token, the recipient is a
    valid address and the operator confirms.

    Returns:
        TransferSummary, or None if the operator declined

    Raises:
        MissingConfigError: If required configuration is missing
        OwnershipError: If the operating account does not own the token
        InvalidInputError: If the token id or recipient stays invalid
    """
    client = _default_factory(client_factory)(config)
    nft_address = config.require("nft_contract_address", hint="Run airspace-deploy first")

    logger.info(f"Connected to =nil; network with account: {client.address}")
    logger.info(f"Account balance: {Web3.from_wei(client.get_balance(), 'ether')} ETH")

    nft = client.contract(nft_address, AIRSPACE_NFT_ABI)

    token_id = ask_until_valid(inputs, "Enter the token ID to transfer", parse_token_id)
    check_ownership(nft, token_id, client.address)

    recipient = ask_until_valid(inputs, "Enter the recipient's =nil; wallet address", parse_address)
    logger.info(f"Preparing to transfer token ID {token_id} to {recipient}...")

    if not inputs.get_confirmation("Are you sure you want to proceed with this transfer?"):
        logger.info("Transfer cancelled")
        return None

    logger.info("Executing transfer...")
    receipt = client.transact(
        nft.functions.transferFrom(client.address, recipient, token_id),
        confirmations=TRANSFER_CONFIRMATIONS
    )
    logger.info(f"✓ NFT successfully transferred! Transaction hash: {receipt.tx_hash}")

    return TransferSummary(
        token_id=token_id,
        from_address=client.address,
        to_address=recipient,
        nft_contract=nft_address,
        receipts=[receipt],
    )


def transfer_nil_and_nft(
    config: NilConfig,
    inputs: InputProvider,
    amount_wei: int = RELAY_AMOUNT_WEI,
    client_factory: Optional[Callable[[NilConfig], NilClient]] = None
) -> Optional[TransferSummary]:
    """
    Move NIL and an NFT through the AirSpaceTransfer relay in three steps.

    1. Send ``amount_wei`` to the relay contract
    2. Approve the relay for the NFT
    3. Call ``transferBoth`` so the relay forwards both

    The forwarding recipient is fixed inside the deployed relay and is read
    from its RECIPIENT() getter. When TRANSFER_RECIPIENT_ADDRESS is set it
    must match, otherwise nothing is sent.

    There is no rollback. If a step fails after an earlier one landed,
    PartialTransferError lists what completed; the NIL or the approval then
    sits at the relay until withdrawn (see withdraw_nil / withdraw_nft).

    Returns:
        TransferSummary, or None if the operator declined

    Raises:
        OwnershipError: If the operating account does not own the token
        ConfigError: If TRANSFER_RECIPIENT_ADDRESS differs from the relay recipient
        PartialTransferError: If a later step fails after an earlier one succeeded
    """
    client = _default_factory(client_factory)(config)
    relay_address = Web3.to_checksum_address(config.require(
        "transfer_contract_address", hint="Run airspace-deploy-transfer first"
    ))
    nft_address = Web3.to_checksum_address(config.require(
        "nft_contract_address", hint="Run airspace-deploy first"
    ))

    logger.info(f"Connected to =nil; network with account: {client.address}")
    logger.info(f"Transfer contract address: {relay_address}")
    logger.info(f"NFT contract address: {nft_address}")

    relay = client.contract(relay_address, AIRSPACE_TRANSFER_ABI)
    nft = client.contract(nft_address, AIRSPACE_NFT_ABI)

    token_id = ask_until_valid(inputs, "Enter the NFT token ID to transfer", parse_token_id)
    check_ownership(nft, token_id, client.address)

    recipient = Web3.to_checksum_address(relay.functions.RECIPIENT().call())
    logger.info(f"Transfer contract forwards to: {recipient}")
    expected = config.transfer_recipient_address
    if expected and expected.strip().lower() != recipient.lower():
        raise ConfigError(
            f"TRANSFER_RECIPIENT_ADDRESS in {config.source} is {expected} but the transfer "
            f"contract forwards to {recipient}. Nothing was sent"
        )

    amount = Web3.from_wei(amount_wei, "ether")
    if not inputs.get_confirmation(
        f"Are you sure you want to transfer {amount} NIL and NFT #{token_id} to {recipient}?"
    ):
        logger.info("Transfer cancelled")
        return None

    steps: List[Tuple[str, Callable[[], TxReceipt]]] = [
        (f"send {amount} NIL to the transfer contract",
         lambda: client.send_value(relay_address, amount_wei, confirmations=RELAY_CONFIRMATIONS)),
        ("approve the transfer contract for the NFT",
         lambda: client.transact(nft.functions.approve(relay_address, token_id),
                                 confirmations=RELAY_CONFIRMATIONS)),
        ("execute transferBoth",
         lambda: client.transact(relay.functions.transferBoth(nft_address, token_id),
                                 confirmations=RELAY_CONFIRMATIONS)),
    ]

    completed: List[str] = []
    receipts: List[TxReceipt] = []
    for number, (name, step) in enumerate(steps, start=1):
        logger.info(f"Step {number}: {name}...")
        try:
            receipts.append(step())
        except Exception as e:
            if not completed:
                raise
            raise PartialTransferError(
                f"Step {number} ({name}) failed after completing: {', '.join(completed)}. "
                f"Nothing was rolled back; recover with withdrawNIL/withdrawNFT "
                f"on the transfer contract (airspace-withdraw). Cause: {e}",
                completed_steps=completed,
                failed_step=name,
            ) from e
        completed.append(name)
        logger.info(f"Step {number} done: {receipts[-1].tx_hash}")

    return TransferSummary(
        token_id=token_id,
        from_address=client.address,
        to_address=recipient,
        nft_contract=nft_address,
        relay_contract=relay_address,
        amount_wei=amount_wei,
        receipts=receipts,
    )


def withdraw_nil(client: NilClient, relay_address: str, amount_wei: int) -> TxReceipt:
    """Pull stranded NIL back out of the relay contract"""
    relay = client.contract(relay_address, AIRSPACE_TRANSFER_ABI)
    return client.transact(relay.functions.withdrawNIL(amount_wei), confirmations=RELAY_CONFIRMATIONS)


def withdraw_nft(client: NilClient, relay_address: str, nft_address: str, token_id: int) -> TxReceipt:
    """Pull a stranded NFT back out of the relay contract"""
    relay = client.contract(relay_address, AIRSPACE_TRANSFER_ABI)
    return client.transact(
        relay.functions.withdrawNFT(Web3.to_checksum_address(nft_address), token_id),
        confirmations=RELAY_CONFIRMATIONS
    )


def recover_from_relay(
    config: NilConfig,
    inputs: InputProvider,
    client_factory: Optional[Callable[[NilConfig], NilClient]] = None
) -> Optional[TxReceipt]:
    """
    Interactively withdraw NIL or an NFT left at the relay contract.

    Returns:
        Receipt of the withdrawal, or None if the operator declined
    """
    client = _default_factory(client_factory)(config)
    relay_address = config.require("transfer_contract_address", hint="Run airspace-deploy-transfer first")

    def parse_kind(answer: str) -> str:
        answer = (answer or "").strip().lower()
        if answer not in ("nil", "nft"):
            raise InvalidInputError(f"Expected 'nil' or 'nft', got {answer!r}")
        return answer

    kind = ask_until_valid(inputs, "What do you want to withdraw from the transfer contract? (nil/nft)", parse_kind)

    if kind == "nil":
        amount_wei = ask_until_valid(inputs, "Enter the amount of NIL to withdraw (e.g., 1)", parse_nil_amount)
        question = f"Withdraw {Web3.from_wei(amount_wei, 'ether')} NIL from {relay_address}?"
        if not inputs.get_confirmation(question):
            logger.info("Withdrawal cancelled")
            return None
        receipt = withdraw_nil(client, relay_address, amount_wei)
    else:
        nft_address = config.require("nft_contract_address", hint="Run airspace-deploy first")
        token_id = ask_until_valid(inputs, "Enter the NFT token ID to withdraw", parse_token_id)
        if not inputs.get_confirmation(f"Withdraw NFT #{token_id} from {relay_address}?"):
            logger.info("Withdrawal cancelled")
            return None
        receipt = withdraw_nft(client, relay_address, nft_address, token_id)

    logger.info(f"Withdrawal executed: {receipt.tx_hash}")
    return receipt
