"""dispatchscan CLI — check contract bytecode against an ABI.

Usage:
    dispatchscan signatures --abi <file>                  List signatures and selectors
    dispatchscan check --abi <file> --bytecode <hex|file> Check raw runtime bytecode
    dispatchscan check --abi <file> --address <addr>      Fetch and check deployed code
    dispatchscan config                                   Show current configuration

Examples:
    dispatchscan check --abi IERC20.json --bytecode out/Token.sol/Token.json
    dispatchscan check --abi IERC20.json --address 0x1234...abcd --chain base
    dispatchscan check --abi IERC20.json --address 0x1234...abcd --rpc http://localhost:8545 -f json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

import httpx

from dispatchscan import __version__
from dispatchscan.analyzer.satisfier import check_functions
from dispatchscan.analyzer.selector import selector_hex, signature
from dispatchscan.core.chains import CHAINS
from dispatchscan.core.config import get_settings
from dispatchscan.core.errors import DispatchScanError
from dispatchscan.core.logging import setup_logging
from dispatchscan.core.types import FunctionCheck
from dispatchscan.ingestion.abi_loader import load_abi, load_bytecode
from dispatchscan.ingestion.code_fetcher import RpcCodeFetcher, check_address

EXIT_SATISFIED = 0
EXIT_UNSATISFIED = 1
EXIT_ERROR = 2


# ── Coloured output helpers ──────────────────────────────────────────────────

_RESET = "\033[0m"
_BOLD = "\033[1m"
_RED = "\033[91m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"


def _c(text: str, code: str) -> str:
    return f"{code}{text}{_RESET}"


# ── CLI argument parser ─────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dispatchscan",
        description="dispatchscan — check that contract bytecode dispatches every function of an ABI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument("--quiet", "-q", action="store_true", help="Minimal output")

    sub = parser.add_subparsers(dest="command")

    # ── signatures ───────────────────────────────────────────────────────────
    sig_p = sub.add_parser("signatures", help="Print canonical signatures and selectors of an ABI")
    sig_p.add_argument("--abi", required=True, help="Path to ABI JSON file or compiler artifact")

    # ── check ────────────────────────────────────────────────────────────────
    check_p = sub.add_parser("check", help="Check bytecode or a deployed contract against an ABI")
    check_p.add_argument("--abi", required=True, help="Path to ABI JSON file or compiler artifact")
    source = check_p.add_mutually_exclusive_group(required=True)
    source.add_argument("--bytecode", "-b", help="Runtime bytecode as hex, or a file containing it")
    source.add_argument("--address", "-a", help="On-chain contract address to fetch & check")
    check_p.add_argument(
        "--chain",
        default=None,
        choices=sorted(CHAINS),
        help="Chain to fetch the contract from (default: settings.default_chain)",
    )
    check_p.add_argument("--rpc", help="JSON-RPC endpoint, overrides --chain")
    check_p.add_argument("--block", help="Block number or tag (default: settings.block_tag)")
    check_p.add_argument(
        "--format",
        "-f",
        default="table",
        choices=["table", "json"],
        help="Output format (default: table)",
    )

    # ── config ───────────────────────────────────────────────────────────────
    sub.add_parser("config", help="Show current configuration")

    return parser


# ── Output ───────────────────────────────────────────────────────────────────


def _print_table(checks: list[FunctionCheck], quiet: bool = False) -> None:
    """Pretty-print per-function results."""
    for check in checks:
        mark = _c("✓", _GREEN) if check.matched else _c("✗", _RED)
        print(f"  {mark} {_c('0x' + check.selector, _CYAN)}  {check.signature}")

    if quiet:
        return
    missing = sum(1 for c in checks if not c.matched)
    if missing:
        print(_c(f"\n  {missing} of {len(checks)} functions not dispatched.", _RED))
    else:
        print(_c(f"\n  All {len(checks)} functions dispatched.", _GREEN))


def _report(checks: list[FunctionCheck], args: argparse.Namespace, target: dict[str, Any]) -> int:
    ok = all(c.matched for c in checks)
    if args.format == "json":
        out = {
            **target,
            "satisfied": ok,
            "functions": [c.to_dict() for c in checks],
        }
        print(json.dumps(out, indent=2))
    else:
        _print_table(checks, quiet=args.quiet)
    return EXIT_SATISFIED if ok else EXIT_UNSATISFIED


# ── Commands ─────────────────────────────────────────────────────────────────


def _run_signatures(args: argparse.Namespace) -> int:
    for entry in load_abi(args.abi):
        print(f"0x{selector_hex(entry)}  {signature(entry)}")
    return EXIT_SATISFIED


async def _fetch_and_check(args: argparse.Namespace, abi: list[dict[str, Any]]) -> list[FunctionCheck]:
    async with RpcCodeFetcher(rpc_url=args.rpc, chain=args.chain, block=args.block) as fetcher:
        if not args.quiet:
            print(f"  Fetching code at {_c(args.address, _CYAN)} on {fetcher.chain}…", file=sys.stderr)
        return await check_address(fetcher, args.address, abi)


def _run_check(args: argparse.Namespace) -> int:
    abi = load_abi(args.abi)

    if args.address:
        checks = asyncio.run(_fetch_and_check(args, abi))
        return _report(checks, args, {"address": args.address})

    bytecode = load_bytecode(args.bytecode)
    checks = check_functions(bytecode, abi)
    return _report(checks, args, {"bytecode_size": len(bytecode) // 2})


def _run_config() -> int:
    """Print current settings (redacted)."""
    s = get_settings()
    print(f"\n{_BOLD}dispatchscan configuration{_RESET}\n")
    for field_name in sorted(type(s).model_fields.keys()):
        val = getattr(s, field_name, "")
        if any(kw in field_name for kw in ("secret", "key", "token")):
            val = "****" if val else "(not set)"
        print(f"  {_DIM}{field_name}:{_RESET}  {val}")

    print(f"\n{_BOLD}Chains{_RESET}\n")
    for key, chain in sorted(CHAINS.items()):
        print(f"  {_DIM}{key}:{_RESET}  {chain.name} (chain id {chain.chain_id})")
    print()
    return 0


# ── Entrypoint ───────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"dispatchscan {__version__}")
        return 0

    if not args.command:
        parser.print_help()
        return 0

    settings = get_settings()
    setup_logging(settings.app_env, "WARNING" if args.quiet else settings.log_level)

    if args.command == "config":
        return _run_config()

    try:
        if args.command == "signatures":
            return _run_signatures(args)
        if args.command == "check":
            return _run_check(args)
    except (DispatchScanError, ValueError, OSError) as exc:
        print(_c(f"Error: {exc}", _RED), file=sys.stderr)
        return EXIT_ERROR
    except httpx.HTTPError as exc:
        print(_c(f"RPC request failed: {exc}", _RED), file=sys.stderr)
        return EXIT_ERROR

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
