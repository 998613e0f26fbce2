"""
Tests for NilClient.
"""
from unittest.mock import MagicMock, PropertyMock

import pytest
from hypothesis import given, strategies as st
from web3.providers.rpc import HTTPProvider

from airspace_nil.client import NilClient, apply_gas_margin
from airspace_nil.exceptions import ConfigError, MissingConfigError, RpcError, TransactionError
from airspace_nil.shard import ShardedHTTPProvider

from conftest import TEST_ADDRESS, TEST_NFT_CONTRACT, TEST_PRIV_KEY, TEST_RPC_URL

TX_HASH = bytes.fromhex("ab" * 32)


def _web3_receipt(status=1, block_number=100, contract_address=None):
    return {
        "transactionHash": TX_HASH,
        "blockNumber": block_number,
        "blockHash": bytes.fromhex("cd" * 32),
        "status": status,
        "gasUsed": 85000,
        "from": TEST_ADDRESS,
        "to": TEST_NFT_CONTRACT,
        "contractAddress": contract_address,
        "logs": [],
    }


@pytest.fixture
def mock_w3():
    w3 = MagicMock()
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.gas_price = 10**9
    w3.eth.chain_id = 1
    w3.eth.estimate_gas.return_value = 21000
    w3.eth.send_raw_transaction.return_value = TX_HASH
    w3.eth.wait_for_transaction_receipt.return_value = _web3_receipt()
    type(w3.eth).block_number = PropertyMock(return_value=101)
    return w3


@pytest.fixture
def client(mock_w3):
    client = NilClient(TEST_RPC_URL, TEST_PRIV_KEY, shard_id="1")
    client.w3 = mock_w3
    signer = MagicMock()
    signer.address = TEST_ADDRESS
    signer.sign_transaction.return_value = MagicMock(raw_transaction=b"signed-raw")
    client.account = signer
    return client


def _contract_call(gas_estimate=100000):
    call = MagicMock()
    call.estimate_gas.return_value = gas_estimate
    call.build_transaction.side_effect = lambda params: {**params, "to": TEST_NFT_CONTRACT, "data": "0x1234"}
    return call


def test_gas_margin_examples():
    assert apply_gas_margin(100000) == 120000
    assert apply_gas_margin(21000) == 25200
    assert apply_gas_margin(1) == 1
    assert apply_gas_margin(0) == 0


@given(st.integers(min_value=0, max_value=10**12))
def test_gas_margin_is_twenty_percent_rounded_down(estimate):
    assert apply_gas_margin(estimate) == estimate * 120 // 100
    assert apply_gas_margin(estimate) >= estimate


def test_rejects_plain_http():
    with pytest.raises(ConfigError, match="https"):
        NilClient("http://rpc.example.com", TEST_PRIV_KEY)


def test_allows_localhost_http():
    client = NilClient("http://localhost:8545", TEST_PRIV_KEY)
    assert client.address == TEST_ADDRESS


def test_rejects_malformed_private_key():
    with pytest.raises(ConfigError, match="PRIVATE_KEY"):
        NilClient(TEST_RPC_URL, "0xnothex")


def test_shard_selects_provider():
    assert isinstance(NilClient(TEST_RPC_URL, TEST_PRIV_KEY, shard_id="1").w3.provider, ShardedHTTPProvider)
    provider = NilClient(TEST_RPC_URL, TEST_PRIV_KEY).w3.provider
    assert isinstance(provider, HTTPProvider)
    assert not isinstance(provider, ShardedHTTPProvider)


def test_from_config_fails_fast_without_private_key(write_env, rpc_calls):
    config = write_env("NIL_TESTNET_URL=https://x\n")
    with pytest.raises(MissingConfigError, match="PRIVATE_KEY not found"):
        NilClient.from_config(config)
    assert rpc_calls == []


def test_from_config_checks_rpc_url_before_shard(write_env):
    config = write_env(f"PRIVATE_KEY={TEST_PRIV_KEY}\n")
    with pytest.raises(MissingConfigError, match="NIL_TESTNET_URL not found"):
        NilClient.from_config(config)


def test_from_config_requires_shard(write_env):
    config = write_env(f"PRIVATE_KEY={TEST_PRIV_KEY}\nNIL_TESTNET_URL={TEST_RPC_URL}\n")
    with pytest.raises(MissingConfigError, match="NIL_SHARD_ID not found in .env. Run airspace-configure-shard"):
        NilClient.from_config(config)


def test_from_config_shard_optional(write_env):
    config = write_env(f"PRIVATE_KEY={TEST_PRIV_KEY}\nNIL_TESTNET_URL={TEST_RPC_URL}\n")
    client = NilClient.from_config(config, require_shard=False)
    assert client.shard_id is None
    assert client.address == TEST_ADDRESS


def test_get_tokens(client, mock_w3):
    mock_w3.provider.make_request.return_value = {"jsonrpc": "2.0", "id": 1, "result": {"0x0001": "1000"}}

    assert client.get_tokens() == {"0x0001": "1000"}
    mock_w3.provider.make_request.assert_called_once_with("eth_getTokens", [TEST_ADDRESS, "latest"])


def test_get_tokens_empty_result(client, mock_w3):
    mock_w3.provider.make_request.return_value = {"jsonrpc": "2.0", "id": 1, "result": None}
    assert client.get_tokens() == {}


def test_get_tokens_error(client, mock_w3):
    mock_w3.provider.make_request.return_value = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "nope"}}
    with pytest.raises(RpcError, match="eth_getTokens"):
        client.get_tokens()


def test_transact_applies_gas_margin_and_waits(client, mock_w3):
    call = _contract_call(100000)

    receipt = client.transact(call, confirmations=2)

    built = call.build_transaction.call_args[0][0]
    assert built["gas"] == 120000
    assert built["nonce"] == 7
    assert built["from"] == TEST_ADDRESS
    mock_w3.eth.send_raw_transaction.assert_called_once_with(b"signed-raw")
    assert receipt.tx_hash == "0x" + "ab" * 32
    assert receipt.block_number == 100
    assert receipt.confirmations == 2


def test_transact_explicit_gas_skips_estimate(client):
    call = _contract_call()
    client.transact(call, gas=50000, confirmations=1)
    call.estimate_gas.assert_not_called()
    assert call.build_transaction.call_args[0][0]["gas"] == 50000


def test_reverted_transaction_raises(client, mock_w3):
    mock_w3.eth.wait_for_transaction_receipt.return_value = _web3_receipt(status=0)
    with pytest.raises(TransactionError, match="reverted"):
        client.transact(_contract_call(), confirmations=1)


def test_confirmation_wait_polls_until_depth(client, mock_w3):
    block_number = PropertyMock(side_effect=[100, 100, 101, 102])
    type(mock_w3.eth).block_number = block_number

    receipt = client.transact(_contract_call(), confirmations=3)

    assert receipt.confirmations == 3
    assert block_number.call_count == 4


def test_confirmation_timeout(client, mock_w3):
    type(mock_w3.eth).block_number = PropertyMock(return_value=100)
    client.receipt_timeout = 0
    with pytest.raises(TransactionError, match="Timed out"):
        client.wait_for_confirmations(TX_HASH, confirmations=5)


def test_send_value_includes_chain_id(client, mock_w3):
    client.send_value(TEST_NFT_CONTRACT, 10**18, confirmations=1)

    tx = client.account.sign_transaction.call_args[0][0]
    assert tx["value"] == 10**18
    assert tx["gas"] == 25200
    assert tx["chainId"] == 1
    assert tx["to"] == TEST_NFT_CONTRACT


def test_deploy_returns_contract_address(client, mock_w3):
    mock_w3.eth.wait_for_transaction_receipt.return_value = _web3_receipt(contract_address=TEST_NFT_CONTRACT)
    mock_w3.eth.contract.return_value.constructor.return_value = _contract_call()

    receipt = client.deploy([], "0x6080")

    assert receipt.contract_address == TEST_NFT_CONTRACT
    mock_w3.eth.contract.assert_called_once_with(abi=[], bytecode="0x6080")


def test_deploy_without_contract_address_fails(client, mock_w3):
    mock_w3.eth.contract.return_value.constructor.return_value = _contract_call()
    with pytest.raises(TransactionError, match="no contract address"):
        client.deploy([], "0x6080")


def test_signing_failure_wrapped(client):
    client.account.sign_transaction.side_effect = ValueError("bad tx")
    with pytest.raises(TransactionError, match="Failed to sign"):
        client.transact(_contract_call(), confirmations=1)
