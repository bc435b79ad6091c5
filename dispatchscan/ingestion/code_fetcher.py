"""Fetch deployed contract code and check it against an ABI.

Any object with an ``async get_code(address) -> str`` method can serve as
the network collaborator; :class:`RpcCodeFetcher` is the bundled one and
talks plain JSON-RPC (``eth_getCode``) over httpx.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any, Protocol

import httpx
from eth_utils import is_address

from dispatchscan.analyzer.satisfier import AbiLike, check_functions, satisfies
from dispatchscan.core.chains import resolve_rpc_url
from dispatchscan.core.config import get_settings
from dispatchscan.core.errors import InvalidAddress, RpcError
from dispatchscan.core.types import FunctionCheck

logger = logging.getLogger(__name__)


class CodeProvider(Protocol):
    """Anything able to return the deployed code at an address."""

    async def get_code(self, address: str) -> str | bytes: ...


def normalize_code(raw: str | bytes) -> str:
    """Bring fetched code to the scanner's form: lowercase hex, no ``0x``.

    ``"0x"`` (no code at the address) normalizes to ``""``.
    """
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).hex()
    code = raw.strip()
    if code[:2] in ("0x", "0X"):
        code = code[2:]
    return code.lower()


def _block_param(block: str | int) -> str:
    """JSON-RPC block parameter: tags pass through, numbers become quantities."""
    if isinstance(block, int):
        return hex(block)
    if block.isdigit():
        return hex(int(block))
    return block


class RpcCodeFetcher:
    """Fetch runtime bytecode through a JSON-RPC endpoint.

    Usage::

        async with RpcCodeFetcher(chain="ethereum") as fetcher:
            ok = await satisfies_at_address(fetcher, "0x...", abi)
    """

    def __init__(
        self,
        rpc_url: str | None = None,
        chain: str | None = None,
        timeout: float | None = None,
        block: str | int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = get_settings()
        self.chain = chain or self.settings.default_chain
        self.rpc_url = rpc_url or resolve_rpc_url(self.chain, self.settings)
        self.block = block if block is not None else self.settings.block_tag
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout or self.settings.rpc_timeout_seconds),
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    # ── Context manager ──────────────────────────────────────────────

    async def __aenter__(self) -> RpcCodeFetcher:
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ── JSON-RPC ─────────────────────────────────────────────────────

    async def _call(self, method: str, params: list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        response = await self._client.post(self.rpc_url, json=payload)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise RpcError(f"{method} returned a malformed response: {data!r}")

        error = data.get("error")
        if error:
            if not isinstance(error, dict):
                raise RpcError(f"{method} failed: {error}")
            raise RpcError(
                f"{method} failed: {error.get('message', error)}",
                rpc_code=error.get("code"),
            )
        if "result" not in data:
            raise RpcError(f"{method} returned no result")
        return data["result"]

    async def get_code(self, address: str) -> str:
        """Return the deployed code at ``address`` as ``0x``-prefixed hex."""
        start = time.monotonic()
        result = await self._call("eth_getCode", [address, _block_param(self.block)])
        if not isinstance(result, str):
            raise RpcError(f"eth_getCode returned a non-string result: {result!r}")
        logger.info(
            "Fetched %d bytes of code",
            max(len(result) - 2, 0) // 2,
            extra={
                "address": address,
                "chain": self.chain,
                "duration_ms": round((time.monotonic() - start) * 1000, 1),
            },
        )
        return result


async def _fetch_code(network: CodeProvider, address: str) -> str:
    if not isinstance(address, str) or not is_address(address):
        raise InvalidAddress(address)
    return normalize_code(await network.get_code(address))


async def satisfies_at_address(network: CodeProvider, address: str, abi: AbiLike) -> bool:
    """Tell whether the contract deployed at ``address`` satisfies an ABI.

    See :func:`dispatchscan.analyzer.satisfier.satisfies` for the semantics.
    Transport failures from ``network`` propagate unchanged.

    Raises:
        InvalidAddress: If ``address`` is not a valid address; nothing is fetched
        MissingInput: If there is no code at the address or no ABI
    """
    bytecode = await _fetch_code(network, address)
    return satisfies(bytecode, abi)


async def check_address(network: CodeProvider, address: str, abi: AbiLike) -> list[FunctionCheck]:
    """Per-function report for the contract deployed at ``address``."""
    bytecode = await _fetch_code(network, address)
    return check_functions(bytecode, abi)
