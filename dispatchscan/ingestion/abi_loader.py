"""Load ABI declarations from JSON files and compiler artifacts."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from eth_utils import is_hex

from dispatchscan.core.errors import InvalidSpecification


def function_entries(abi_json: Any) -> list[dict[str, Any]]:
    """Keep only the function declarations of an ABI.

    Accepts a bare ABI list or an artifact object (Truffle/Hardhat/Foundry)
    wrapping it under ``"abi"``. Entries without a ``type`` key are treated
    as functions so hand-written declaration lists work as-is.

    Raises:
        InvalidSpecification: If no ABI list can be found
    """
    if isinstance(abi_json, dict) and isinstance(abi_json.get("abi"), list):
        abi_json = abi_json["abi"]
    if not isinstance(abi_json, list):
        raise InvalidSpecification(
            "ABI JSON must be an array of entries or an artifact with an 'abi' array"
        )
    return [
        entry for entry in abi_json
        if not isinstance(entry, dict) or entry.get("type", "function") == "function"
    ]


def load_abi(path: str | Path) -> list[dict[str, Any]]:
    """Read an ABI file and return its function declarations."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return function_entries(data)


def load_bytecode(value: str) -> str:
    """Accept bytecode as hex text or as a path to a file containing it.

    Artifacts with a ``deployedBytecode`` field are also understood. The
    result is lowercase hex without ``0x``.

    Raises:
        ValueError: If the value is neither an existing file nor hex text,
            or the file does not hold hex bytecode
    """
    text = value
    # os.path.isfile tolerates hex strings too long to be file names
    if os.path.isfile(value):
        text = Path(value).read_text(encoding="utf-8").strip()
        if text.startswith("{"):
            artifact = json.loads(text)
            deployed = artifact.get("deployedBytecode", "")
            # Foundry nests it as {"object": "0x..."}
            if isinstance(deployed, dict):
                deployed = deployed.get("object", "")
            text = deployed
    if not isinstance(text, str) or not is_hex(text.strip()):
        raise ValueError(f"Not hex bytecode or a file containing it: {value[:66]}")
    text = text.strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    return text.lower()
