"""
Shard routing for =nil; JSON-RPC requests.

The =nil; network expects a shard identifier on a handful of account and
transaction methods. :func:`decorate_request` adds it to exactly those
methods; :class:`ShardedHTTPProvider` applies it to every outgoing request.
"""
import logging
import re
from typing import Any, List, Optional, Sequence

from web3 import HTTPProvider

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

SHARD_AWARE_METHODS = frozenset({
    "eth_getBalance",
    "eth_call",
    "eth_estimateGas",
    "eth_sendTransaction",
    "eth_sendRawTransaction",
})


def validate_shard_id(shard_id: Any) -> str:
    """
    Normalize a shard id to its string form.

    Raises:
        ConfigError: If the shard id is not a non-negative integer
    """
    value = str(shard_id).strip()
    if not re.fullmatch(r"[0-9]+", value):
        raise ConfigError(f"Shard ID must be numeric, got: {shard_id!r}")
    return value


def decorate_request(method: str, params: Optional[Sequence[Any]], shard_id: str) -> List[Any]:
    """
    Attach the shard id to the parameters of a shard-aware method.

    When the last parameter is an object the shard is added to a copy of it,
    otherwise ``{"shard": shard_id}`` is appended. Other methods pass through
    unchanged. The caller's parameters are never mutated.

    Args:
        method: JSON-RPC method name
        params: Positional parameters
        shard_id: Shard identifier (digits)

    Returns:
        New parameter list
    """
    decorated = list(params or [])
    if method not in SHARD_AWARE_METHODS:
        return decorated

    shard_id = validate_shard_id(shard_id)
    if decorated and isinstance(decorated[-1], dict):
        last = dict(decorated[-1])
        last["shard"] = shard_id
        decorated[-1] = last
    else:
        decorated.append({"shard": shard_id})
    return decorated


class ShardedHTTPProvider(HTTPProvider):
    """HTTPProvider that routes shard-aware calls to a fixed shard"""

    def __init__(self, endpoint_uri: str, shard_id: str, **kwargs: Any):
        super().__init__(endpoint_uri, **kwargs)
        self.shard_id = validate_shard_id(shard_id)

    def make_request(self, method, params):
        params = decorate_request(method, params, self.shard_id)
        logger.debug(f"RPC {method} on shard {self.shard_id}")
        return super().make_request(method, params)
