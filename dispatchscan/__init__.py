"""dispatchscan — static detection of function dispatch in EVM bytecode.

Tells whether a piece of deployed contract code routes calls for every
function of a given ABI, by recognizing the selector dispatch idiom
compilers emit (``PUSH4 <selector> EQ PUSHn <dest> JUMPI``).
"""

from dispatchscan.analyzer.satisfier import check_functions, satisfies
from dispatchscan.analyzer.scanner import matches
from dispatchscan.analyzer.selector import selector, selector_hex, signature
from dispatchscan.core.errors import (
    DispatchScanError,
    InvalidAddress,
    InvalidSpecification,
    MissingInput,
    RpcError,
)
from dispatchscan.core.types import FunctionCheck, FunctionInput, FunctionSpec
from dispatchscan.ingestion.code_fetcher import (
    RpcCodeFetcher,
    check_address,
    satisfies_at_address,
)

__version__ = "0.1.0"

__all__ = [
    "DispatchScanError",
    "FunctionCheck",
    "FunctionInput",
    "FunctionSpec",
    "InvalidAddress",
    "InvalidSpecification",
    "MissingInput",
    "RpcCodeFetcher",
    "RpcError",
    "check_address",
    "check_functions",
    "matches",
    "satisfies",
    "satisfies_at_address",
    "selector",
    "selector_hex",
    "signature",
]
