"""Error types raised by dispatchscan.

Every error carries a stable ``code`` so callers (and the CLI) can tell the
failure kinds apart without matching on message text:

    try:
        satisfies(bytecode, abi)
    except MissingInput as exc:
        print(exc.code, exc.missing)  # MISSING_INPUT bytecode
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes for the failure kinds of the library."""

    DISPATCH_ERROR = "DISPATCH_ERROR"
    INVALID_SPECIFICATION = "INVALID_SPECIFICATION"
    MISSING_INPUT = "MISSING_INPUT"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    RPC_ERROR = "RPC_ERROR"


UNEXPECTED_ABI_ERROR = """Please provide an ABI matching the following structure:
[
  {
    "name": "fn1",
    "inputs": [{ "name": "arg1", "type": "type1" },...]
  },
  {
    "name": "fn2",
    "inputs": [{ "name": "arg1", "type": "type1" },...]
  },
  ...
]"""


class DispatchScanError(Exception):
    """Base exception for dispatchscan errors."""

    code: ErrorCode = ErrorCode.DISPATCH_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidSpecification(DispatchScanError):
    """A function declaration lacks a name or a well-formed inputs list."""

    code = ErrorCode.INVALID_SPECIFICATION

    def __init__(self, detail: str = "") -> None:
        message = f"{detail}\n{UNEXPECTED_ABI_ERROR}" if detail else UNEXPECTED_ABI_ERROR
        super().__init__(message)
        self.detail = detail


class MissingInput(DispatchScanError):
    """Bytecode or ABI was not supplied to a satisfaction check."""

    code = ErrorCode.MISSING_INPUT

    _MESSAGES = {
        "bytecode": "Cannot assess contract ABI without a bytecode",
        "abi": "Cannot assess contract ABI without an ABI, please provide one",
    }

    def __init__(self, missing: str) -> None:
        super().__init__(self._MESSAGES.get(missing, f"Missing input: {missing}"))
        self.missing = missing


class InvalidAddress(DispatchScanError):
    """The address handed to the network adapter is malformed."""

    code = ErrorCode.INVALID_ADDRESS

    def __init__(self, address: object) -> None:
        super().__init__(f"Cannot assess contract ABI with an invalid address: {address}")
        self.address = address


class RpcError(DispatchScanError):
    """The JSON-RPC node answered with an error object."""

    code = ErrorCode.RPC_ERROR

    def __init__(self, message: str, rpc_code: int | None = None) -> None:
        super().__init__(message)
        self.rpc_code = rpc_code
