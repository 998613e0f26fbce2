"""
Exceptions for the AirSpace =nil; tooling.
"""
from typing import List, Optional


class AirSpaceError(Exception):
    """Base exception for AirSpace tooling errors."""
    pass


class ConfigError(AirSpaceError):
    """Raised when the local configuration is unusable."""
    pass


class MissingConfigError(ConfigError):
    """Raised when a required configuration key is absent."""

    def __init__(self, key: str, source: str = ".env", hint: Optional[str] = None):
        self.key = key
        self.source = source
        message = f"{key} not found in {source}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class ContractArtifactError(AirSpaceError):
    """Raised when a compiled contract artifact is missing or malformed."""
    pass


class FaucetError(AirSpaceError):
    """Raised when faucet funding fails."""
    pass


class RpcError(AirSpaceError):
    """Raised when a raw JSON-RPC call returns an error object."""
    pass


class TransactionError(AirSpaceError):
    """Raised when a transaction cannot be signed, sent or confirmed."""
    pass


class PartialTransferError(TransactionError):
    """
    Raised when a multi-step transfer fails after some steps already landed.

    Completed steps are not rolled back; whatever they moved stays at the
    relay contract until withdrawn.
    """

    def __init__(self, message: str, completed_steps: List[str], failed_step: str):
        self.completed_steps = list(completed_steps)
        self.failed_step = failed_step
        super().__init__(message)


class OwnershipError(AirSpaceError):
    """Raised when the caller does not own the token it tries to move."""

    def __init__(self, token_id: int, owner: str):
        self.token_id = token_id
        self.owner = owner
        super().__init__(f"You don't own token ID {token_id}. It is owned by {owner}")


class InvalidInputError(AirSpaceError):
    """Raised when interactive input cannot be accepted or defaulted."""
    pass
