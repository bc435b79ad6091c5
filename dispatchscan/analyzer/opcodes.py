"""EVM opcodes taking part in the selector dispatch idiom."""

from __future__ import annotations

from enum import Enum


class Opcode(Enum):
    """EVM opcodes the dispatch scanner relies on."""
    EQ = 0x14
    JUMPI = 0x57
    PUSH1 = 0x60
    PUSH4 = 0x63
    PUSH32 = 0x7F

    @property
    def hex(self) -> str:
        """Two lowercase hex characters, as the opcode appears in code text."""
        return f"{self.value:02x}"


def decode_push_length(opcode_hex: str) -> int | None:
    """Number of literal bytes pushed by a PUSHn opcode.

    ``"60"`` (PUSH1) -> 1 ... ``"7f"`` (PUSH32) -> 32. Anything else,
    including malformed or truncated text, yields ``None``.
    """
    if len(opcode_hex) != 2:
        return None
    try:
        value = int(opcode_hex, 16)
    except ValueError:
        return None
    if Opcode.PUSH1.value <= value <= Opcode.PUSH32.value:
        return value - Opcode.PUSH1.value + 1
    return None
