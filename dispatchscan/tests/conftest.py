"""Shared fixtures for the dispatchscan test suite."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from dispatchscan.core.config import get_settings

# Well-known ERC-20 selectors
TRANSFER = "a9059cbb"        # transfer(address,uint256)
APPROVE = "095ea7b3"         # approve(address,uint256)
TOTAL_SUPPLY = "18160ddd"    # totalSupply()
TRANSFER_FROM = "23b872dd"   # transferFrom(address,address,uint256)
BALANCE_OF = "70a08231"      # balanceOf(address)


def build_idiom(selector: str, dest: str = "005c", push: str | None = None, branch: str = "57") -> str:
    """Hex text of ``PUSH4 <selector> EQ PUSHn <dest> JUMPI``."""
    if push is None:
        push = f"{0x5f + len(dest) // 2:02x}"
    return f"63{selector}14{push}{dest}{branch}"


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so env patches apply per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def idiom() -> Callable[..., str]:
    return build_idiom


@pytest.fixture
def erc20_bytecode() -> str:
    """Runtime code fragment with a solc-style dispatcher for five ERC-20 functions."""
    return (
        "608060405234801561001057600080fd5b50600436106100575760003560e01c80"
        f"{build_idiom(APPROVE, '005c')}80"
        f"{build_idiom(TOTAL_SUPPLY, '008c')}80"
        f"{build_idiom(TRANSFER_FROM, '00aa')}80"
        f"{build_idiom(BALANCE_OF, '00da')}80"
        f"{build_idiom(TRANSFER, '010a')}"
        "5b600080fd5b"
    )


@pytest.fixture
def erc20_abi() -> list[dict[str, Any]]:
    return [
        {
            "type": "function",
            "name": "approve",
            "inputs": [{"name": "spender", "type": "address"}, {"name": "amount", "type": "uint256"}],
            "outputs": [{"name": "", "type": "bool"}],
            "stateMutability": "nonpayable",
        },
        {"type": "function", "name": "totalSupply", "inputs": [], "stateMutability": "view"},
        {
            "type": "function",
            "name": "transferFrom",
            "inputs": [
                {"name": "from", "type": "address"},
                {"name": "to", "type": "address"},
                {"name": "amount", "type": "uint256"},
            ],
        },
        {"type": "function", "name": "balanceOf", "inputs": [{"name": "owner", "type": "address"}]},
        {
            "type": "function",
            "name": "transfer",
            "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
        },
    ]


@pytest.fixture
def transfer_spec() -> dict[str, Any]:
    return {"name": "transfer", "inputs": [{"type": "address"}, {"type": "uint256"}]}


@pytest.fixture
def contract_address() -> str:
    return "0x" + "11" * 20
