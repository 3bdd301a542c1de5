import logging
from typing import NamedTuple

from core.redis.providers import KeyValueStore
from wallet.entities import DEFAULT_MIN_BALANCE, NetworkAlias, NetworkConfig

NETWORK_KEY = ("env", "eth", "network")


class NetworkPreset(NamedTuple):
    alias: NetworkAlias
    rpc_url: str
    faucet_url: str | None


# Short names accepted by set_network, resolved to (alias, rpc, faucet).
NETWORK_ALIASES: dict[str, NetworkPreset] = {
    "op": NetworkPreset("optimism", "https://mainnet.optimism.io", None),
    "op_test": NetworkPreset(
        "op-sepolia", "https://sepolia.optimism.io", "https://console.optimism.io/faucet"
    ),
    "optimism": NetworkPreset("optimism", "https://mainnet.optimism.io", None),
    "op-sepolia": NetworkPreset(
        "op-sepolia", "https://sepolia.optimism.io", "https://console.optimism.io/faucet"
    ),
    "mainnet": NetworkPreset("mainnet", "https://ethereum-rpc.publicnode.com", None),
    "sepolia": NetworkPreset(
        "sepolia", "https://ethereum-sepolia-rpc.publicnode.com", "https://sepoliafaucet.com"
    ),
    "arbitrum": NetworkPreset("arbitrum", "https://arb1.arbitrum.io/rpc", None),
    "base": NetworkPreset("base", "https://mainnet.base.org", None),
    "map": NetworkPreset("map", "https://rpc.maplabs.io", None),
}

FALLBACK_NETWORK = NetworkConfig(
    alias="op-sepolia",
    rpc_url="https://sepolia.optimism.io",
    faucet_url="https://console.optimism.io/faucet",
    tokens_addresses=[],
    min_balance=DEFAULT_MIN_BALANCE,
)

# Fixed configurations for scripts that do not read the registry.
PRESET_NETWORKS: dict[str, NetworkConfig] = {
    "map": NetworkConfig(
        alias="map",
        rpc_url="https://rpc.maplabs.io",
        tokens_addresses=["0xed8b05159460c900f12075c3b901ca274fd7486f"],
        min_balance=DEFAULT_MIN_BALANCE,
        gas_for_sweep="0.00000015",
    ),
    "optimism": NetworkConfig(
        alias="optimism",
        rpc_url="https://mainnet.optimism.io",
        tokens_addresses=[],
        min_balance=DEFAULT_MIN_BALANCE,
        gas_for_sweep="0.00000015",
    ),
}


def resolve_network(alias_or_endpoint: str) -> NetworkConfig:
    """
    Build a fresh network configuration from an alias or a literal RPC endpoint.

    Parameters
    ----------
    alias_or_endpoint : str
        Key of ``NETWORK_ALIASES`` or an RPC URL

    Returns
    -------
    NetworkConfig
        Configuration with no tracked tokens and the default minimum balance
    """
    value = alias_or_endpoint.strip()
    preset = NETWORK_ALIASES.get(value)
    if preset is None:
        return NetworkConfig(alias="custom", rpc_url=value)
    return NetworkConfig(
        alias=preset.alias,
        rpc_url=preset.rpc_url,
        faucet_url=preset.faucet_url,
        tokens_addresses=[],
        min_balance=DEFAULT_MIN_BALANCE,
    )


class NetworkRegistry:
    """
    Repository of the single active network configuration.

    Parameters
    ----------
    kv_store : KeyValueStore
        Key-value store holding the configuration
    logger : logging.Logger
        Logger instance
    """

    def __init__(self, kv_store: KeyValueStore, logger: logging.Logger):
        self.kv = kv_store
        self.logger = logger

    @staticmethod
    def valid_networks() -> list[str]:
        return list(NETWORK_ALIASES)

    async def get_network(self) -> NetworkConfig:
        """
        Return the stored network or the fallback when none is stored.

        Returns
        -------
        NetworkConfig
            Active network configuration
        """
        stored = await self.kv.get(NETWORK_KEY)
        if stored is None:
            return FALLBACK_NETWORK.model_copy(deep=True)
        return NetworkConfig.model_validate(stored)

    async def _save(self, network: NetworkConfig) -> NetworkConfig:
        await self.kv.set(NETWORK_KEY, network.model_dump())
        return network

    async def set_network(self, alias_or_endpoint: str) -> NetworkConfig:
        """
        Replace the active network.

        The previous configuration is overwritten, tracked tokens and the
        minimum balance are reset.

        Parameters
        ----------
        alias_or_endpoint : str
            Network alias or literal RPC endpoint

        Returns
        -------
        NetworkConfig
            Newly stored configuration
        """
        network = resolve_network(alias_or_endpoint)
        self.logger.info(f"Switching network to {network.alias} ({network.rpc_url})")
        return await self._save(network)

    async def add_token_address(self, token_address: str) -> bool:
        """
        Start tracking a token contract on the active network.

        Addresses already tracked (compared case-insensitively) are left as is.

        Parameters
        ----------
        token_address : str
            Token contract address

        Returns
        -------
        bool
            True if the address was added
        """
        network = await self.get_network()
        tracked = {address.lower() for address in network.tokens_addresses}
        if token_address.lower() in tracked:
            self.logger.info(f"Token {token_address} is already tracked")
            return False

        network.tokens_addresses.append(token_address)
        await self._save(network)
        return True

    async def remove_token_address(self, token_address: str) -> bool:
        """
        Stop tracking a token contract. Removing an unknown address is a no-op.

        Returns
        -------
        bool
            True if the address was tracked before
        """
        network = await self.get_network()
        remaining = [address for address in network.tokens_addresses if address.lower() != token_address.lower()]
        removed = len(remaining) != len(network.tokens_addresses)
        network.tokens_addresses = remaining
        await self._save(network)
        return removed

    async def set_min_balance(self, min_balance: str) -> NetworkConfig:
        network = await self.get_network()
        updated = NetworkConfig.model_validate({**network.model_dump(), "min_balance": str(min_balance)})
        return await self._save(updated)
