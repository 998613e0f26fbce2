"""
Pytest fixtures for the AirSpace =nil; tooling tests.
"""
import time
from typing import List, Optional
from unittest.mock import MagicMock

import pytest
from eth_account import Account
from web3.providers.rpc import HTTPProvider

from airspace_nil.client import NilClient
from airspace_nil.config import ConfigStore, NilConfig
from airspace_nil.models import TxReceipt

# Constants for testing
TEST_RPC_URL = "https://rpc.example.com"
TEST_FAUCET_URL = "https://faucet.example.com/api/faucet"
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_ADDRESS = Account.from_key(TEST_PRIV_KEY).address
TEST_NFT_CONTRACT = "0x1234567890123456789012345678901234567890"
TEST_TRANSFER_CONTRACT = "0x2345678901234567890123456789012345678901"
TEST_RECIPIENT = "0x3456789012345678901234567890123456789012"
OTHER_OWNER = "0x4567890123456789012345678901234567890123"


@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    """Make time.sleep instantaneous so faucet waits and mint delays don't slow the suite down"""
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _patch_http_provider(monkeypatch):
    """
    Stub every Web3 HTTP call so no DNS / network traffic is triggered.
    Works for all tests because it is autouse.
    """
    calls = []

    def _dummy(self, method, params=None):
        calls.append((method, params))
        if method == "eth_chainId":
            return {"jsonrpc": "2.0", "id": 1, "result": "0x1"}
        if method == "eth_gasPrice":
            return {"jsonrpc": "2.0", "id": 1, "result": "0x3b9aca00"}  # 1 gwei
        return {"jsonrpc": "2.0", "id": 1, "result": "0x0"}

    monkeypatch.setattr(HTTPProvider, "make_request", _dummy, raising=True)
    return calls


@pytest.fixture
def rpc_calls(_patch_http_provider):
    """JSON-RPC requests that reached the (stubbed) transport"""
    return _patch_http_provider


@pytest.fixture
def env_file(tmp_path):
    return tmp_path / ".env"


@pytest.fixture
def store(env_file):
    return ConfigStore(str(env_file))


@pytest.fixture
def write_env(env_file, store):
    """Write a configuration file and return the loaded NilConfig"""
    def _write(text: str, environ: Optional[dict] = None) -> NilConfig:
        env_file.write_text(text, encoding="utf-8")
        return NilConfig.from_store(store, environ=environ or {})
    return _write


@pytest.fixture
def full_config(write_env):
    """Configuration with every key the orchestrators need"""
    return write_env(
        f"NIL_TESTNET_URL={TEST_RPC_URL}\n"
        f"NIL_FAUCET_URL={TEST_FAUCET_URL}\n"
        "NIL_SHARD_ID=1\n"
        f"PRIVATE_KEY={TEST_PRIV_KEY}\n"
        f"NFT_CONTRACT_ADDRESS={TEST_NFT_CONTRACT}\n"
        f"TRANSFER_CONTRACT_ADDRESS={TEST_TRANSFER_CONTRACT}\n"
    )


class ScriptedInputProvider:
    """InputProvider that replays canned answers and records the questions"""

    def __init__(self, answers: Optional[List[str]] = None, confirmations: Optional[List[bool]] = None):
        self.answers = list(answers or [])
        self.confirmations = list(confirmations or [])
        self.questions: List[str] = []

    def ask(self, question: str) -> str:
        self.questions.append(question)
        return self.answers.pop(0) if self.answers else ""

    def get_secret(self, question: str) -> str:
        return self.ask(question)

    def get_confirmation(self, question: str) -> bool:
        self.questions.append(question)
        return self.confirmations.pop(0) if self.confirmations else False


@pytest.fixture
def scripted_inputs():
    return ScriptedInputProvider


def make_receipt(tx_hash: str = "0x" + "ab" * 32, **overrides) -> TxReceipt:
    data = {
        "transactionHash": tx_hash,
        "blockNumber": 12345,
        "blockHash": "0x" + "cd" * 32,
        "status": 1,
        "gasUsed": 85000,
        "from": TEST_ADDRESS,
        "to": TEST_NFT_CONTRACT,
        "logs": [],
        "confirmations": 2,
    }
    data.update(overrides)
    return TxReceipt.model_validate(data)


@pytest.fixture
def receipt_factory():
    return make_receipt


@pytest.fixture
def fake_client():
    """
    NilClient stand-in for orchestrator tests.

    Contract handles are MagicMocks, so ``contract.functions.<fn>(...)`` records
    the call and ``transact`` returns a successful receipt.
    """
    client = MagicMock(spec=NilClient)
    client.address = TEST_ADDRESS
    client.shard_id = "1"
    client.get_balance.return_value = 10**18
    client.get_tokens.return_value = {}
    client.transact.return_value = make_receipt()
    client.send_value.return_value = make_receipt("0x" + "01" * 32)
    client.deploy.return_value = make_receipt(contractAddress=TEST_NFT_CONTRACT, to=None)

    contracts = {}

    def _contract(address, abi):
        key = address.lower()
        if key not in contracts:
            contracts[key] = MagicMock(name=f"contract_{key}")
        return contracts[key]

    client.contract.side_effect = _contract
    client.contracts = contracts
    return client


@pytest.fixture
def client_factory(fake_client):
    """Factory recording the configs it was built from"""
    factory = MagicMock(return_value=fake_client)
    return factory
