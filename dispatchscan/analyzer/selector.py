"""Canonical signatures and 4-byte function selectors."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from eth_utils import keccak

from dispatchscan.core.types import FunctionSpec

logger = logging.getLogger(__name__)

SELECTOR_SIZE = 4


def signature(spec: FunctionSpec | Mapping[str, Any]) -> str:
    """Tell the canonical signature of a function declaration.

    Args:
        spec: ``FunctionSpec`` or ABI mapping with ``name`` and ``inputs``

    Returns:
        Signature for the declared name and input types, e.g.
        ``"fn(uint256,address)"``

    Raises:
        InvalidSpecification: If the declaration has no name or inputs list
    """
    fn = FunctionSpec.from_abi(spec)
    return f"{fn.name}({','.join(fn.types)})"


def selector(spec: FunctionSpec | Mapping[str, Any]) -> bytes:
    """First 4 bytes of the keccak256 hash of the canonical signature."""
    text = signature(spec)
    digest = keccak(text=text)[:SELECTOR_SIZE]
    logger.debug("Derived selector %s for %s", digest.hex(), text)
    return digest


def selector_hex(spec: FunctionSpec | Mapping[str, Any]) -> str:
    """Selector as 8 lowercase hex characters without ``0x``."""
    return selector(spec).hex()
