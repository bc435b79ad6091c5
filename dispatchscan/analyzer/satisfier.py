"""Bytecode satisfaction checks over a whole ABI."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from dispatchscan.analyzer.scanner import matches
from dispatchscan.analyzer.selector import selector, signature
from dispatchscan.core.errors import MissingInput
from dispatchscan.core.types import FunctionCheck, FunctionSpec

logger = logging.getLogger(__name__)

AbiLike = Sequence[FunctionSpec | Mapping[str, Any]] | FunctionSpec | Mapping[str, Any]


def _normalize_inputs(bytecode: str | None, abi: AbiLike | None) -> list[FunctionSpec]:
    if not bytecode:
        raise MissingInput("bytecode")
    if abi is None:
        raise MissingInput("abi")
    if not isinstance(abi, (list, tuple)):
        abi = [abi]
    return [FunctionSpec.from_abi(entry) for entry in abi]


def satisfies(bytecode: str, abi: AbiLike) -> bool:
    """Tell whether some bytecode provides dispatch for every function of an ABI.

    The selectors of the ABI are looked up in the dispatcher that contracts run
    when they receive a call. This does not tell whether the bytecode implements
    exactly the given ABI, only that it routes calls for all of its functions.
    An empty ABI is satisfied by any bytecode.

    Args:
        bytecode: Lowercase hex runtime code without ``0x``
        abi: List of function declarations, or a single declaration

    Returns:
        True if every declared function is dispatched, False otherwise

    Raises:
        MissingInput: If bytecode or ABI is absent
        InvalidSpecification: If a declaration is malformed
    """
    specs = _normalize_inputs(bytecode, abi)
    for spec in specs:
        if not matches(bytecode, selector(spec)):
            logger.debug("No dispatch found for %s", signature(spec), extra={"signature": signature(spec)})
            return False
    return True


def check_functions(bytecode: str, abi: AbiLike) -> list[FunctionCheck]:
    """Scan for every declared function and report each outcome.

    Same validation as :func:`satisfies`, but never stops early, so callers
    can list which selectors are missing.
    """
    specs = _normalize_inputs(bytecode, abi)
    checks: list[FunctionCheck] = []
    for spec in specs:
        sel = selector(spec)
        checks.append(
            FunctionCheck(
                signature=signature(spec),
                selector=sel.hex(),
                matched=matches(bytecode, sel),
            )
        )
    return checks
