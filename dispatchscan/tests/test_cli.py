"""Tests for the dispatchscan CLI (dispatchscan/cli/main.py).

Covers:
- Argument parsing (signatures, check, config, version)
- Exit codes for satisfied / unsatisfied / invalid input
- Table and JSON output
- Address checks through a patched fetcher
"""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from dispatchscan.cli.main import (
    EXIT_ERROR,
    EXIT_SATISFIED,
    EXIT_UNSATISFIED,
    build_parser,
    main,
)
from dispatchscan.core.errors import InvalidSpecification
from dispatchscan.ingestion.abi_loader import function_entries, load_bytecode


# ── Fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """main() installs its own handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def abi_file(tmp_path, erc20_abi):
    path = tmp_path / "IERC20.json"
    abi = erc20_abi + [
        {"type": "event", "name": "Transfer", "inputs": [{"type": "address", "indexed": True}]},
        {"type": "constructor", "inputs": []},
    ]
    path.write_text(json.dumps(abi))
    return path


@pytest.fixture
def mint_abi_file(tmp_path):
    path = tmp_path / "Mintable.json"
    path.write_text(json.dumps([{"name": "mint", "inputs": [{"type": "address"}, {"type": "uint256"}]}]))
    return path


class FakeFetcher:
    """Stands in for RpcCodeFetcher inside the CLI."""

    instances: list["FakeFetcher"] = []
    code = "0x"

    def __init__(self, rpc_url=None, chain=None, block=None):
        self.rpc_url = rpc_url
        self.chain = chain or "ethereum"
        self.block = block
        FakeFetcher.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        return None

    async def get_code(self, address):
        return self.code


# ── Parser Tests ─────────────────────────────────────────────────────────


class TestParser:

    def test_check_requires_source(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["check", "--abi", "a.json"])

    def test_check_sources_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["check", "--abi", "a.json", "-b", "00", "-a", "0x00"])

    def test_check_defaults(self):
        args = build_parser().parse_args(["check", "--abi", "a.json", "-b", "6080"])
        assert args.format == "table"
        assert args.chain is None
        assert args.rpc is None

    def test_unknown_chain_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["check", "--abi", "a.json", "-a", "0x00", "--chain", "nowhere"])


# ── Commands ─────────────────────────────────────────────────────────────


class TestMain:

    def test_version(self, capsys):
        assert main(["--version"]) == 0
        assert "dispatchscan 0.1.0" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_signatures(self, abi_file, capsys):
        assert main(["signatures", "--abi", str(abi_file)]) == 0
        out = capsys.readouterr().out
        assert "0xa9059cbb  transfer(address,uint256)" in out
        assert "0x18160ddd  totalSupply()" in out
        assert "Transfer(" not in out

    def test_check_satisfied(self, abi_file, erc20_bytecode, capsys):
        code = main(["check", "--abi", str(abi_file), "--bytecode", "0x" + erc20_bytecode])
        assert code == EXIT_SATISFIED
        out = capsys.readouterr().out
        assert "All 5 functions dispatched" in out

    def test_check_unsatisfied(self, mint_abi_file, erc20_bytecode, capsys):
        code = main(["check", "--abi", str(mint_abi_file), "--bytecode", erc20_bytecode])
        assert code == EXIT_UNSATISFIED
        assert "1 of 1 functions not dispatched" in capsys.readouterr().out

    def test_check_json(self, abi_file, erc20_bytecode, capsys):
        code = main(["-q", "check", "--abi", str(abi_file), "-b", erc20_bytecode, "-f", "json"])
        assert code == EXIT_SATISFIED
        out = json.loads(capsys.readouterr().out)
        assert out["satisfied"] is True
        assert out["bytecode_size"] == len(erc20_bytecode) // 2
        assert {"signature": "transfer(address,uint256)", "selector": "0xa9059cbb", "matched": True} in out["functions"]

    def test_check_bytecode_file(self, abi_file, erc20_bytecode, tmp_path):
        artifact = tmp_path / "Token.json"
        artifact.write_text(json.dumps({"deployedBytecode": {"object": "0x" + erc20_bytecode}}))
        assert main(["-q", "check", "--abi", str(abi_file), "-b", str(artifact)]) == EXIT_SATISFIED

    def test_check_empty_bytecode(self, abi_file, capsys):
        assert main(["check", "--abi", str(abi_file), "-b", "0x"]) == EXIT_ERROR
        assert "without a bytecode" in capsys.readouterr().err

    def test_check_malformed_abi(self, tmp_path, erc20_bytecode, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"inputs": []}]))
        assert main(["check", "--abi", str(path), "-b", erc20_bytecode]) == EXIT_ERROR
        assert "Please provide an ABI" in capsys.readouterr().err

    def test_check_missing_abi_file(self, tmp_path, erc20_bytecode):
        assert main(["check", "--abi", str(tmp_path / "nope.json"), "-b", erc20_bytecode]) == EXIT_ERROR

    def test_check_nonexistent_bytecode_path(self, abi_file, tmp_path, capsys):
        missing = tmp_path / "Token.jsn"
        assert main(["-q", "check", "--abi", str(abi_file), "-b", str(missing)]) == EXIT_ERROR
        assert "Not hex bytecode" in capsys.readouterr().err

    def test_check_non_hex_bytecode_file(self, abi_file, tmp_path, capsys):
        path = tmp_path / "code.hex"
        path.write_text("[1]")
        assert main(["-q", "check", "--abi", str(abi_file), "-b", str(path)]) == EXIT_ERROR
        err = capsys.readouterr().err
        assert "Not hex bytecode" in err

    def test_check_artifact_without_string_bytecode(self, abi_file, tmp_path):
        path = tmp_path / "Token.json"
        path.write_text(json.dumps({"deployedBytecode": 5}))
        assert main(["-q", "check", "--abi", str(abi_file), "-b", str(path)]) == EXIT_ERROR

    def test_check_address(self, abi_file, erc20_bytecode, contract_address, capsys):
        FakeFetcher.instances = []
        FakeFetcher.code = "0x" + erc20_bytecode
        with patch("dispatchscan.cli.main.RpcCodeFetcher", FakeFetcher):
            code = main(["check", "--abi", str(abi_file), "-a", contract_address, "--chain", "base", "-f", "json"])
        assert code == EXIT_SATISFIED
        assert FakeFetcher.instances[0].chain == "base"
        out = json.loads(capsys.readouterr().out)
        assert out["address"] == contract_address

    def test_check_invalid_address(self, abi_file, capsys):
        FakeFetcher.code = "0x00"
        with patch("dispatchscan.cli.main.RpcCodeFetcher", FakeFetcher):
            code = main(["check", "--abi", str(abi_file), "-a", "0x1234"])
        assert code == EXIT_ERROR
        assert "invalid address" in capsys.readouterr().err

    def test_config_redacts_keys(self, capsys, monkeypatch):
        monkeypatch.setenv("DISPATCHSCAN_ALCHEMY_API_KEY", "super-secret")
        assert main(["config"]) == 0
        out = capsys.readouterr().out
        assert "super-secret" not in out
        assert "alchemy_api_key" in out
        assert "default_chain" in out
        assert "Base (chain id 8453)" in out


# ── ABI loading ──────────────────────────────────────────────────────────


class TestAbiLoader:

    def test_function_entries_filters(self, erc20_abi):
        abi = erc20_abi + [{"type": "event", "name": "Approval", "inputs": []}, {"type": "receive"}]
        assert function_entries(abi) == erc20_abi

    def test_untyped_entries_kept(self):
        abi = [{"name": "f", "inputs": []}]
        assert function_entries(abi) == abi

    def test_artifact_unwrapped(self, erc20_abi):
        assert function_entries({"contractName": "Token", "abi": erc20_abi}) == erc20_abi

    def test_not_an_abi(self):
        with pytest.raises(InvalidSpecification):
            function_entries({"name": "f"})

    def test_load_bytecode_text(self):
        assert load_bytecode(" 0x6080AB ") == "6080ab"

    def test_load_bytecode_long_hex(self):
        long_hex = "60" * 5000
        assert load_bytecode(long_hex) == long_hex

    def test_load_bytecode_plain_file(self, tmp_path):
        path = tmp_path / "code.hex"
        path.write_text("0x6080\n")
        assert load_bytecode(str(path)) == "6080"

    def test_load_bytecode_hardhat_artifact(self, tmp_path):
        path = tmp_path / "Token.json"
        path.write_text(json.dumps({"deployedBytecode": "0x6080"}))
        assert load_bytecode(str(path)) == "6080"

    @pytest.mark.parametrize("value", ["Token.jsn", "0xzz", "transfer(address,uint256)"])
    def test_load_bytecode_rejects_non_hex(self, value, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ValueError, match="Not hex bytecode"):
            load_bytecode(value)

    def test_load_bytecode_empty_prefix(self):
        assert load_bytecode("0x") == ""
