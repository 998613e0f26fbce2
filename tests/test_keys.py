"""
Tests for shard configuration and private key import.
"""
import json

import pytest

from airspace_nil.exceptions import ConfigError, InvalidInputError
from airspace_nil.keys import (
    configure_shard, extract_private_key, normalize_shard_id, read_nil_cli_private_key
)

from conftest import TEST_ADDRESS, TEST_PRIV_KEY


@pytest.fixture
def nil_cli_config(tmp_path):
    path = tmp_path / "nil" / "config.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"rpc_endpoint": "https://rpc.example.com", "private_key": TEST_PRIV_KEY[2:]}))
    return path


@pytest.mark.parametrize("answer,expected", [("1", "1"), (" 2 ", "2"), ("shard 3", "3"), ("1a2", "12"), ("2²", "2")])
def test_normalize_shard_id(answer, expected):
    assert normalize_shard_id(answer) == expected


@pytest.mark.parametrize("answer", ["", "abc", "  ", "²", "٣"])
def test_normalize_shard_id_rejects_empty(answer):
    with pytest.raises(InvalidInputError):
        normalize_shard_id(answer)


def test_configure_shard_persists(env_file, store, scripted_inputs):
    env_file.write_text("NIL_SHARD_ID=1\nPRIVATE_KEY=0xabc\n")

    assert configure_shard(store, scripted_inputs(["", "shard-4"])) == "4"
    assert env_file.read_text() == "NIL_SHARD_ID=4\nPRIVATE_KEY=0xabc\n"


def test_configure_shard_gives_up(store, scripted_inputs, env_file):
    with pytest.raises(InvalidInputError):
        configure_shard(store, scripted_inputs(["x", "y", "z"]))
    assert not env_file.exists()


def test_read_private_key_adds_prefix(nil_cli_config):
    assert read_nil_cli_private_key(nil_cli_config) == TEST_PRIV_KEY


def test_read_private_key_env_override(nil_cli_config, monkeypatch):
    monkeypatch.setenv("NIL_CLI_CONFIG", str(nil_cli_config))
    assert read_nil_cli_private_key() == TEST_PRIV_KEY


def test_read_private_key_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        read_nil_cli_private_key(tmp_path / "absent.json")


@pytest.mark.parametrize("content", ["{oops", json.dumps({"rpc_endpoint": "x"}), json.dumps(["private_key"])])
def test_read_private_key_bad_content(tmp_path, content):
    path = tmp_path / "config.json"
    path.write_text(content)
    with pytest.raises(ConfigError):
        read_nil_cli_private_key(path)


def test_extract_private_key_saves_after_confirmation(nil_cli_config, store, scripted_inputs, caplog):
    caplog.set_level("INFO")

    address = extract_private_key(store, scripted_inputs(confirmations=[True]), nil_cli_config)

    assert address == TEST_ADDRESS
    assert store.get("PRIVATE_KEY") == TEST_PRIV_KEY
    assert TEST_PRIV_KEY not in caplog.text
    assert TEST_PRIV_KEY[2:] not in caplog.text


def test_extract_private_key_declined(nil_cli_config, store, scripted_inputs, env_file):
    assert extract_private_key(store, scripted_inputs(confirmations=[False]), nil_cli_config) is None
    assert not env_file.exists()


def test_extract_private_key_pasted_when_cli_config_missing(tmp_path, store, scripted_inputs, caplog):
    caplog.set_level("INFO")
    inputs = scripted_inputs([TEST_PRIV_KEY[2:]], confirmations=[True])

    address = extract_private_key(store, inputs, tmp_path / "absent.json")

    assert address == TEST_ADDRESS
    assert store.get("PRIVATE_KEY") == TEST_PRIV_KEY
    assert inputs.questions[0].startswith("Paste the private key")
    assert TEST_PRIV_KEY[2:] not in caplog.text


def test_extract_private_key_empty_paste_aborts(tmp_path, store, scripted_inputs, env_file):
    with pytest.raises(ConfigError, match="no key entered"):
        extract_private_key(store, scripted_inputs([""]), tmp_path / "absent.json")
    assert not env_file.exists()


def test_extract_private_key_pasted_garbage_rejected(tmp_path, store, scripted_inputs, env_file):
    with pytest.raises(ConfigError, match="not a valid key"):
        extract_private_key(store, scripted_inputs(["0xnotakey"], [True]), tmp_path / "absent.json")
    assert not env_file.exists()
