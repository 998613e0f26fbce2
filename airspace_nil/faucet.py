"""
Client for the =nil; test-network faucet.
"""
import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TOKEN = "NIL"


def faucet_username(address: str) -> str:
    """Derive the faucet username from an address (first 8 hex digits)."""
    return address[2:10]


class FaucetClient:
    """
    Requests test tokens from the faucet.

    A request is made exactly once: a non-200 answer or a connection error is
    logged and reported as ``False``. Callers decide whether to try again.
    """

    def __init__(
        self,
        faucet_url: str,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the FaucetClient

        Args:
            faucet_url: Faucet base URL (e.g., "https://api.devnet.nil.foundation/api/faucet")
            timeout: Timeout for HTTP requests in seconds
            session: Optional requests session to reuse
            logger: Optional logger instance
        """
        self.faucet_url = faucet_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def url_for(self, address: str, token: str = DEFAULT_TOKEN) -> str:
        return f"{self.faucet_url}/{faucet_username(address)}/{token}"

    def request_tokens(self, address: str, token: str = DEFAULT_TOKEN, amount: Optional[int] = None) -> bool:
        """
        Ask the faucet to send tokens to an address.

        Args:
            address: Recipient account address
            token: Token symbol (e.g., "NIL", "BTC", "USDC")
            amount: Optional amount; the faucet default applies when omitted

        Returns:
            True if the faucet answered 200, False otherwise
        """
        url = self.url_for(address, token)
        params = {"amount": amount} if amount is not None else None

        self.logger.info(f"Requesting {token} tokens from faucet for address {address}...")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.error(f"Error requesting tokens from faucet: {e}")
            return False

        if response.status_code == 200:
            self.logger.info(f"Successfully requested {token} tokens from faucet.")
            self.logger.debug(f"Faucet response: {response.text}")
            return True

        self.logger.error(f"Failed to request tokens. Status: {response.status_code}")
        return False
