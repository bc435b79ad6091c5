"""Supported EVM chain configurations."""

from __future__ import annotations

from dataclasses import dataclass

from dispatchscan.core.config import Settings


@dataclass(frozen=True)
class ChainConfig:
    """Configuration for a supported EVM chain."""

    chain_id: int
    name: str
    rpc_url_template: str  # {api_key} placeholder filled from settings
    api_key_setting: str = ""  # Settings attribute holding the key

    def rpc_url(self, settings: Settings) -> str:
        """Render the RPC endpoint, substituting the provider API key."""
        if "{api_key}" not in self.rpc_url_template:
            return self.rpc_url_template
        api_key = getattr(settings, self.api_key_setting, "") if self.api_key_setting else ""
        return self.rpc_url_template.format(api_key=api_key)


# ── Chain Registry ───────────────────────────────────────────────────────────

CHAINS: dict[str, ChainConfig] = {
    "ethereum": ChainConfig(
        chain_id=1,
        name="Ethereum Mainnet",
        rpc_url_template="https://eth-mainnet.g.alchemy.com/v2/{api_key}",
        api_key_setting="alchemy_api_key",
    ),
    "sepolia": ChainConfig(
        chain_id=11155111,
        name="Sepolia Testnet",
        rpc_url_template="https://sepolia.infura.io/v3/{api_key}",
        api_key_setting="infura_api_key",
    ),
    "polygon": ChainConfig(
        chain_id=137,
        name="Polygon Mainnet",
        rpc_url_template="https://polygon-mainnet.g.alchemy.com/v2/{api_key}",
        api_key_setting="alchemy_api_key",
    ),
    "bsc": ChainConfig(
        chain_id=56,
        name="BNB Smart Chain",
        rpc_url_template="https://bsc-dataseed.binance.org",
    ),
    "arbitrum": ChainConfig(
        chain_id=42161,
        name="Arbitrum One",
        rpc_url_template="https://arb-mainnet.g.alchemy.com/v2/{api_key}",
        api_key_setting="alchemy_api_key",
    ),
    "optimism": ChainConfig(
        chain_id=10,
        name="Optimism",
        rpc_url_template="https://opt-mainnet.g.alchemy.com/v2/{api_key}",
        api_key_setting="alchemy_api_key",
    ),
    "base": ChainConfig(
        chain_id=8453,
        name="Base",
        rpc_url_template="https://base-mainnet.g.alchemy.com/v2/{api_key}",
        api_key_setting="alchemy_api_key",
    ),
    "gnosis": ChainConfig(
        chain_id=100,
        name="Gnosis Chain",
        rpc_url_template="https://rpc.gnosischain.com",
    ),
}


def get_chain_config(chain_name: str) -> ChainConfig | None:
    """Get chain configuration by name."""
    return CHAINS.get(chain_name.lower())


def resolve_rpc_url(chain_name: str, settings: Settings) -> str:
    """Pick the JSON-RPC endpoint for a chain.

    An explicit ``settings.rpc_url`` always wins over the registry.

    Raises:
        ValueError: If the chain is unknown and no override is configured
    """
    if settings.rpc_url:
        return settings.rpc_url
    chain_config = get_chain_config(chain_name)
    if not chain_config:
        raise ValueError(f"Unsupported chain: {chain_name}")
    return chain_config.rpc_url(settings)
