"""
NilClient - signing JSON-RPC client for the =nil; test network.
"""
import time
import logging
import urllib.parse
from typing import Dict, Any, Optional, Union

from web3 import Web3
from web3.exceptions import Web3Exception
from web3.types import TxReceipt as Web3TxReceipt
from eth_account import Account
from eth_account.signers.local import LocalAccount

from .config import NilConfig
from .exceptions import ConfigError, RpcError, TransactionError
from .models import TxReceipt
from .shard import ShardedHTTPProvider

GAS_MARGIN_PERCENT = 20
RECEIPT_TIMEOUT = 120

logger = logging.getLogger(__name__)


def apply_gas_margin(estimate: int, margin_percent: int = GAS_MARGIN_PERCENT) -> int:
    """Add a safety margin to a gas estimate (integer math, rounds down)."""
    return estimate * (100 + margin_percent) // 100


def to_hex(value: Union[bytes, str]) -> str:
    if isinstance(value, (bytes, bytearray)):
        return '0x' + bytes(value).hex()
    return str(value)


class NilClient:
    """
    Client for sending transactions to the =nil; network.

    This client handles:
    1. Shard-aware JSON-RPC transport
    2. Gas estimation with a fixed safety margin
    3. Signing, sending and waiting for confirmations
    """

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        shard_id: Optional[str] = None,
        timeout: int = 60,
        poll_interval: float = 1.0,
        receipt_timeout: int = RECEIPT_TIMEOUT,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the NilClient

        Args:
            rpc_url: =nil; RPC endpoint URL
            private_key: Hex private key of the operating account
            shard_id: Shard to route shard-aware calls to (optional)
            timeout: Timeout for RPC requests in seconds
            poll_interval: Seconds between receipt/confirmation polls
            receipt_timeout: Seconds to wait for a receipt and its confirmations
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ConfigError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
            ConfigError: If the private key is malformed
        """
        parsed = urllib.parse.urlparse(rpc_url)
        host = parsed.netloc.split(':')[0] if parsed.netloc else ''
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not is_local:
            raise ConfigError(f"rpc_url must use https:// for security (got: {parsed.scheme}://)")

        self.rpc_url = rpc_url
        self.shard_id = shard_id
        self.poll_interval = poll_interval
        self.receipt_timeout = receipt_timeout
        self.logger = logger or logging.getLogger(__name__)

        request_kwargs = {"timeout": timeout}
        if shard_id is not None:
            provider = ShardedHTTPProvider(rpc_url, shard_id, request_kwargs=request_kwargs)
        else:
            provider = Web3.HTTPProvider(rpc_url, request_kwargs=request_kwargs)
        self.w3 = Web3(provider)

        try:
            self.account: LocalAccount = Account.from_key(private_key)
        except Exception as e:
            raise ConfigError(f"PRIVATE_KEY is not a valid private key: {type(e).__name__}")

    @classmethod
    def from_config(cls, config: NilConfig, require_shard: bool = True, **kwargs: Any) -> "NilClient":
        """
        Create a client from the shared configuration.

        Keys are checked before anything touches the network, in the order
        PRIVATE_KEY, NIL_TESTNET_URL, NIL_SHARD_ID.

        Raises:
            MissingConfigError: If a required key is not configured
        """
        private_key = config.require("private_key")
        rpc_url = config.require("rpc_url")
        if require_shard:
            shard_id = config.require(
                "shard_id", hint="Run airspace-configure-shard to configure a shard first"
            )
        else:
            shard_id = config.shard_id
        return cls(rpc_url=rpc_url, private_key=private_key, shard_id=shard_id, **kwargs)

    @property
    def address(self) -> str:
        """Checksummed address of the operating account"""
        return self.account.address

    def get_balance(self, address: Optional[str] = None) -> int:
        """
        Get the native balance of an account in wei.

        Args:
            address: Account to query (defaults to the operating account)
        """
        return self.w3.eth.get_balance(address or self.address)

    def get_tokens(self, address: Optional[str] = None) -> Dict[str, Any]:
        """
        Get the token balances of an account.

        Returns:
            Mapping of token id to amount, as reported by eth_getTokens

        Raises:
            RpcError: If the node answers with an error object
        """
        response = self.w3.provider.make_request("eth_getTokens", [address or self.address, "latest"])
        if response.get("error"):
            raise RpcError(f"eth_getTokens failed: {response['error']}")
        return response.get("result") or {}

    def contract(self, address: str, abi: list):
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def estimate_gas(self, call, value: int = 0) -> int:
        """
        Estimate gas for a contract call and add the safety margin.

        Args:
            call: Bound contract function or constructor
            value: Value in wei sent with the call
        """
        estimate = call.estimate_gas({'from': self.address, 'value': value})
        gas = apply_gas_margin(estimate)
        self.logger.info(f"Estimated gas: {estimate} (limit with margin: {gas})")
        return gas

    def transact(self, call, value: int = 0, confirmations: int = 2, gas: Optional[int] = None) -> TxReceipt:
        """
        Estimate, sign, send a contract call and wait for confirmations.

        Args:
            call: Bound contract function or constructor
            value: Value in wei sent with the call
            confirmations: Number of blocks to wait for, including the inclusion block
            gas: Explicit gas limit (skips estimation)

        Returns:
            Transaction receipt object

        Raises:
            TransactionError: If signing, sending or confirmation fails
            Web3Exception: If there's an error with Web3 operations
        """
        if gas is None:
            gas = self.estimate_gas(call, value)
        try:
            tx = call.build_transaction({
                'from': self.address,
                'nonce': self.w3.eth.get_transaction_count(self.address),
                'gas': gas,
                'gasPrice': self.w3.eth.gas_price,
                'value': value,
            })
        except Web3Exception:
            raise
        except Exception as e:
            raise TransactionError(f"Failed to build transaction: {str(e)}")
        return self._send(tx, confirmations)

    def send_value(self, to: str, value: int, confirmations: int = 1) -> TxReceipt:
        """
        Send native tokens to an address.

        Args:
            to: Recipient address
            value: Amount in wei
            confirmations: Number of blocks to wait for
        """
        to = Web3.to_checksum_address(to)
        estimate = self.w3.eth.estimate_gas({'from': self.address, 'to': to, 'value': value})
        tx = {
            'from': self.address,
            'to': to,
            'value': value,
            'nonce': self.w3.eth.get_transaction_count(self.address),
            'gas': apply_gas_margin(estimate),
            'gasPrice': self.w3.eth.gas_price,
            'chainId': self.w3.eth.chain_id,
        }
        return self._send(tx, confirmations)

    def deploy(self, abi: list, bytecode: str, confirmations: int = 1) -> TxReceipt:
        """
        Deploy a contract.

        Returns:
            Receipt whose contract_address holds the new contract

        Raises:
            TransactionError: If the receipt carries no contract address
        """
        factory = self.w3.eth.contract(abi=abi, bytecode=bytecode)
        receipt = self.transact(factory.constructor(), confirmations=confirmations)
        if not receipt.contract_address:
            raise TransactionError(f"Deployment {receipt.tx_hash} produced no contract address")
        return receipt

    def _send(self, tx: Dict[str, Any], confirmations: int) -> TxReceipt:
        try:
            signed_tx = self.account.sign_transaction(tx)
        except Exception as e:
            self.logger.error(f"Transaction signing failed: {e}")
            raise TransactionError(f"Failed to sign transaction: {str(e)}")

        try:
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except Web3Exception:
            raise
        except Exception as e:
            self.logger.error(f"Failed to send transaction: {e}")
            raise TransactionError(f"Failed to send transaction: {str(e)}")

        self.logger.info(f"Transaction sent: {to_hex(tx_hash)}")
        return self.wait_for_confirmations(tx_hash, confirmations)

    def wait_for_confirmations(self, tx_hash: Union[bytes, str], confirmations: int = 2) -> TxReceipt:
        """
        Wait until a transaction is mined and buried under enough blocks.

        Args:
            tx_hash: Transaction hash
            confirmations: Blocks to wait for, counting the inclusion block

        Raises:
            TransactionError: If the transaction reverted or confirmations time out
        """
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.receipt_timeout,
                poll_latency=self.poll_interval
            )
        except Web3Exception as e:
            raise TransactionError(f"No receipt for {to_hex(tx_hash)}: {str(e)}")

        if receipt.get("status") == 0:
            raise TransactionError(f"Transaction {to_hex(tx_hash)} reverted")

        deadline = time.monotonic() + self.receipt_timeout
        seen = self.w3.eth.block_number - receipt["blockNumber"] + 1
        while seen < confirmations:
            if time.monotonic() > deadline:
                raise TransactionError(
                    f"Timed out waiting for {confirmations} confirmations of {to_hex(tx_hash)}"
                )
            time.sleep(self.poll_interval)
            seen = self.w3.eth.block_number - receipt["blockNumber"] + 1

        result = self._convert_receipt(receipt)
        result.confirmations = max(seen, 1)
        return result

    def _convert_receipt(self, web3_receipt: Web3TxReceipt) -> TxReceipt:
        """
        Convert Web3 receipt to our TxReceipt model

        Args:
            web3_receipt: The Web3 transaction receipt

        Returns:
            Our TxReceipt model
        """
        receipt_dict = dict(web3_receipt)

        # Convert bytes to hex strings
        for key, value in list(receipt_dict.items()):
            if isinstance(value, (bytes, bytearray)):
                receipt_dict[key] = to_hex(value)
        receipt_dict["logs"] = [dict(log) for log in receipt_dict.get("logs") or []]

        return TxReceipt.model_validate(receipt_dict)
