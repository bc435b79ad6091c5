"""Dispatch pattern scanner.

Solidity and Vyper dispatchers compare the incoming call selector against
each public function in turn:

    PUSH4 <selector>   63 xxxxxxxx
    EQ                 14
    PUSHn <dest>       60..7f <n bytes>
    JUMPI              57

The scanner looks for that sequence directly in the hex text of the code,
without disassembling it. Only the first occurrence of the
``PUSH4 <selector> EQ`` prefix is considered; if the branch that follows
it is malformed the function is reported as missing even when a valid
sequence appears later in the code.
"""

from __future__ import annotations

import logging

from dispatchscan.analyzer.opcodes import Opcode, decode_push_length

logger = logging.getLogger(__name__)


def selector_eval(selector: bytes) -> str:
    """Hex text of ``PUSH4 <selector> EQ`` for a 4-byte selector."""
    return f"{Opcode.PUSH4.hex}{selector.hex()}{Opcode.EQ.hex}"


def matches(bytecode: str, selector: bytes) -> bool:
    """Tell whether ``bytecode`` branches on ``selector``.

    Args:
        bytecode: Lowercase hex instruction stream without ``0x``
        selector: 4-byte function selector

    Returns:
        True if the selector comparison is followed by a well-formed
        ``PUSHn <dest> JUMPI`` branch, False otherwise
    """
    pattern = selector_eval(selector)
    start = bytecode.find(pattern)
    if start < 0:
        return False

    # PUSHn carrying the jump destination
    push_at = start + len(pattern)
    push_length = decode_push_length(bytecode[push_at:push_at + 2])
    if push_length is None:
        logger.debug(
            "Selector %s compared but not followed by a PUSH", selector.hex(),
            extra={"selector": selector.hex()},
        )
        return False

    jumpi_at = push_at + 2 + push_length * 2
    found = bytecode[jumpi_at:jumpi_at + 2] == Opcode.JUMPI.hex
    if not found:
        logger.debug(
            "Selector %s branch is missing JUMPI at offset %d", selector.hex(), jumpi_at // 2,
            extra={"selector": selector.hex()},
        )
    return found
