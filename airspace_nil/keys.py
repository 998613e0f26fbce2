"""
Shard selection and import of the =nil; CLI private key.
"""
import os
import re
import json
import logging
from pathlib import Path
from typing import Optional, Union

from eth_account import Account

from .config import ConfigStore
from .exceptions import ConfigError, InvalidInputError
from .prompts import InputProvider, ask_until_valid

NIL_CLI_CONFIG = Path("~/.nil/config.json")

logger = logging.getLogger(__name__)


def normalize_shard_id(answer: str) -> str:
    """
    Keep only the digits of a shard answer.

    Raises:
        InvalidInputError: If no digits are left
    """
    digits = re.sub(r"[^0-9]", "", answer or "")
    if not digits:
        raise InvalidInputError(f"Invalid shard ID: {answer!r}")
    return digits


def configure_shard(store: ConfigStore, inputs: InputProvider) -> str:
    """
    Ask for a shard id and persist it as NIL_SHARD_ID.

    Returns:
        The saved shard id
    """
    current = store.get("NIL_SHARD_ID")
    if current:
        logger.info(f"Current shard ID: {current}")
    shard_id = ask_until_valid(inputs, "Enter the shard ID to use (e.g., 1, 2, 3, etc.)", normalize_shard_id)
    store.upsert("NIL_SHARD_ID", shard_id)
    return shard_id


def nil_cli_config_path() -> Path:
    return Path(os.environ.get("NIL_CLI_CONFIG", str(NIL_CLI_CONFIG))).expanduser()


def read_nil_cli_private_key(path: Optional[Union[str, Path]] = None) -> str:
    """
    Read the private key the =nil; CLI stores in its config file.

    Args:
        path: Config file location (defaults to NIL_CLI_CONFIG or ~/.nil/config.json)

    Raises:
        ConfigError: If the file is missing, is not JSON or has no private_key
    """
    path = Path(path).expanduser() if path else nil_cli_config_path()
    if not path.exists():
        raise ConfigError(f"=nil; CLI config not found at {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")
    if not isinstance(data, dict) or not data.get("private_key"):
        raise ConfigError(f"No private_key in {path}")

    key = str(data["private_key"]).strip()
    if not key.startswith("0x"):
        key = "0x" + key
    return key


def extract_private_key(
    store: ConfigStore,
    inputs: InputProvider,
    path: Optional[Union[str, Path]] = None
) -> Optional[str]:
    """
    Copy the =nil; CLI private key into the configuration after confirmation.

    Only the derived address is shown, never the key itself. Without a
    =nil; CLI config file the key can be pasted through hidden input.

    Returns:
        Address of the imported key, or None if the operator declined

    Raises:
        ConfigError: If the config file is unusable, nothing was pasted or
            the key is invalid
    """
    cli_path = Path(path).expanduser() if path else nil_cli_config_path()
    if cli_path.exists():
        key = read_nil_cli_private_key(cli_path)
        origin = "the =nil; CLI config"
    else:
        logger.warning(f"=nil; CLI config not found at {cli_path}")
        key = (inputs.get_secret("Paste the private key to import (leave empty to abort)") or "").strip()
        if not key:
            raise ConfigError(f"=nil; CLI config not found at {cli_path} and no key entered")
        if not key.startswith("0x"):
            key = "0x" + key
        origin = "the pasted key"

    try:
        address = Account.from_key(key).address
    except Exception as e:
        raise ConfigError(f"private_key in {origin} is not a valid key: {type(e).__name__}")

    logger.info(f"Found private key for address {address}")
    if not inputs.get_confirmation(f"Save this key as PRIVATE_KEY in {store.path.name}?"):
        logger.info(f"Key not saved. Add PRIVATE_KEY=<key> to {store.path} manually to use it.")
        return None

    store.upsert("PRIVATE_KEY", key)
    return address
