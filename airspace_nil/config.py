"""
Local configuration for the AirSpace =nil; tooling.

Every script shares one dotenv-style file of ``KEY=value`` lines. Reads go
through :class:`ConfigStore` into an explicit :class:`NilConfig`; writes go
through :meth:`ConfigStore.upsert`, which replaces a key in place or appends
it and leaves every other line untouched.
"""
import os
import re
import stat
import logging
from pathlib import Path
from typing import Dict, Optional, Mapping

import portalocker
from dotenv import dotenv_values, set_key
from pydantic import BaseModel, Field

from .exceptions import ConfigError, MissingConfigError

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"
DEFAULT_RPC_URL = "https://testnet.nil.foundation"
DEFAULT_FAUCET_URL = "https://api.devnet.nil.foundation/api/faucet"
DEFAULT_SHARD_ID = "1"

# NilConfig field -> key in the configuration file
CONFIG_KEYS: Dict[str, str] = {
    "rpc_url": "NIL_TESTNET_URL",
    "faucet_url": "NIL_FAUCET_URL",
    "shard_id": "NIL_SHARD_ID",
    "wallet_address": "NIL_WALLET_ADDRESS",
    "private_key": "PRIVATE_KEY",
    "nft_contract_address": "NFT_CONTRACT_ADDRESS",
    "transfer_contract_address": "TRANSFER_CONTRACT_ADDRESS",
    "transfer_recipient_address": "TRANSFER_RECIPIENT_ADDRESS",
    "artifacts_dir": "ARTIFACTS_DIR",
    "metadata_dir": "METADATA_DIR",
}

SECRET_KEYS = frozenset({"PRIVATE_KEY"})

_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _redact(key: str, value: str) -> str:
    if key in SECRET_KEYS:
        return f"[REDACTED - {len(value)} chars]"
    return value


class ConfigStore:
    """Line-oriented ``KEY=value`` file with key-level upsert semantics"""

    def __init__(self, path: Optional[str] = None):
        """
        Initialize the config store.

        Args:
            path: Optional custom path for the configuration file. Defaults to
                AIRSPACE_ENV_FILE or ``.env`` in the working directory.
        """
        if path:
            self.path = Path(path)
        else:
            self.path = Path(os.environ.get("AIRSPACE_ENV_FILE", DEFAULT_ENV_FILE))

    def _get_lock_path(self) -> str:
        """Get path for the lock file"""
        return str(self.path) + '.lock'

    def read(self) -> Dict[str, str]:
        """
        Parse the configuration file.

        Returns:
            Mapping of key to value. Later duplicates win, inline comments
            are dropped and variables are not expanded. A missing file reads
            as empty.
        """
        if not self.path.exists():
            return {}
        values = dotenv_values(self.path, interpolate=False, encoding="utf-8")
        return {key: value for key, value in values.items() if value is not None}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.read().get(key, default)

    def upsert(self, key: str, value: str) -> None:
        """
        Set a single key, replacing it in place or appending it.

        Args:
            key: Configuration key
            value: New value (single line)

        Raises:
            ConfigError: If the key or value cannot be stored as a single line
        """
        self.upsert_many({key: value})

    def upsert_many(self, updates: Mapping[str, str]) -> None:
        """
        Set several keys under one lock.

        Lines for other keys, comments and blank lines are written back
        unchanged.
        """
        for key, value in updates.items():
            if not _KEY_RE.match(key):
                raise ConfigError(f"Invalid configuration key: {key!r}")
            if "\n" in str(value) or "\r" in str(value):
                raise ConfigError(f"Value for {key} must be a single line")

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with portalocker.Lock(self._get_lock_path(), timeout=10):
            self.path.touch(exist_ok=True)
            if os.name == 'posix' and SECRET_KEYS.intersection(updates):
                os.chmod(self.path, stat.S_IRUSR | stat.S_IWUSR)  # 0600 before the secret lands

            for key, value in updates.items():
                set_key(self.path, key, str(value), quote_mode="never", encoding="utf-8")

        for key, value in updates.items():
            logger.info(f"{key} saved to {self.path.name}: {_redact(key, str(value))}")


class NilConfig(BaseModel):
    """
    Snapshot of the shared configuration for one script invocation.

    Values come from the configuration file; environment variables only fill
    keys the file does not define.
    """
    rpc_url: Optional[str] = None
    faucet_url: str = DEFAULT_FAUCET_URL
    shard_id: Optional[str] = None
    wallet_address: Optional[str] = None
    private_key: Optional[str] = Field(None, repr=False)
    nft_contract_address: Optional[str] = None
    transfer_contract_address: Optional[str] = None
    transfer_recipient_address: Optional[str] = None
    artifacts_dir: str = "artifacts"
    metadata_dir: str = "metadata"
    source: str = DEFAULT_ENV_FILE
    base_dir: str = "."

    @classmethod
    def from_store(cls, store: ConfigStore, environ: Optional[Mapping[str, str]] = None) -> "NilConfig":
        """
        Load configuration from a store.

        Args:
            store: ConfigStore to read
            environ: Environment mapping used for keys missing from the file
                (defaults to os.environ)

        Returns:
            NilConfig instance
        """
        if environ is None:
            environ = os.environ
        file_values = store.read()
        data = {}
        for field, key in CONFIG_KEYS.items():
            value = file_values.get(key)
            if value in (None, ""):
                value = environ.get(key)
            if value not in (None, ""):
                data[field] = value
        data["source"] = store.path.name
        data["base_dir"] = str(store.path.parent)
        return cls(**data)

    def require(self, field: str, hint: Optional[str] = None) -> str:
        """
        Return a configured value or fail.

        Args:
            field: NilConfig field name
            hint: Optional next step appended to the error message

        Raises:
            MissingConfigError: If the value is not set
        """
        value = getattr(self, field)
        if not value:
            raise MissingConfigError(CONFIG_KEYS[field], self.source, hint)
        return value

    def resolve_path(self, value: str) -> Path:
        """Resolve a configured directory relative to the configuration file"""
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = Path(self.base_dir) / path
        return path
