import pytest
from pydantic import ValidationError

from wallet.entities import NetworkConfig
from wallet.networks import (
    FALLBACK_NETWORK,
    NETWORK_ALIASES,
    NETWORK_KEY,
    PRESET_NETWORKS,
    NetworkRegistry,
)
from _wallet_helpers import TOKEN_A, TOKEN_B


class TestNetworkConfig:
    """
    Validation of the network entity.
    """

    def test_rejects_unknown_alias(self):
        with pytest.raises(ValidationError):
            NetworkConfig(alias="bitcoin", rpc_url="https://rpc.test")

    @pytest.mark.parametrize("rpc_url", ["", "   "])
    def test_rejects_empty_rpc_url(self, rpc_url):
        with pytest.raises(ValidationError):
            NetworkConfig(alias="custom", rpc_url=rpc_url)

    @pytest.mark.parametrize("min_balance", ["-1", "abc"])
    def test_rejects_invalid_min_balance(self, min_balance):
        with pytest.raises(ValidationError):
            NetworkConfig(alias="custom", rpc_url="https://rpc.test", min_balance=min_balance)

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            NetworkConfig(alias="custom", rpc_url="https://rpc.test", usdt="0x0")

    def test_is_funded(self):
        network = NetworkConfig(alias="custom", rpc_url="https://rpc.test", min_balance="0.0015")

        assert network.is_funded("0.0015")
        assert network.is_funded("1.0")
        assert not network.is_funded("0.0014")

    def test_presets_are_valid(self):
        assert PRESET_NETWORKS["map"].tokens_addresses == ["0xed8b05159460c900f12075c3b901ca274fd7486f"]
        assert PRESET_NETWORKS["optimism"].rpc_url == "https://mainnet.optimism.io"


class TestNetworkRegistry:
    """
    Tests for the single active network slot.
    """

    @pytest.mark.asyncio
    async def test_get_network_returns_fallback_when_unset(self, network_registry: NetworkRegistry):
        network = await network_registry.get_network()

        assert network == FALLBACK_NETWORK
        assert network.alias == "op-sepolia"
        assert network.rpc_url == "https://sepolia.optimism.io"
        assert network.faucet_url == "https://console.optimism.io/faucet"

    @pytest.mark.asyncio
    async def test_fallback_is_not_shared_between_calls(self, network_registry: NetworkRegistry):
        network = await network_registry.get_network()
        network.tokens_addresses.append(TOKEN_A)

        assert FALLBACK_NETWORK.tokens_addresses == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("alias", list(NETWORK_ALIASES))
    async def test_set_network_resolves_known_aliases(self, network_registry: NetworkRegistry, alias):
        """
        Every alias of the lookup table yields its exact endpoints.

        Parameters
        ----------
        network_registry : NetworkRegistry
            Registry fixture
        alias : str
            Alias from the lookup table
        """
        preset = NETWORK_ALIASES[alias]

        network = await network_registry.set_network(alias)

        assert network.rpc_url == preset.rpc_url
        assert network.faucet_url == preset.faucet_url
        assert network.alias == preset.alias
        assert await network_registry.get_network() == network

    @pytest.mark.asyncio
    async def test_short_aliases(self, network_registry: NetworkRegistry):
        op = await network_registry.set_network("op")
        assert (op.rpc_url, op.faucet_url) == ("https://mainnet.optimism.io", None)

        op_test = await network_registry.set_network("op_test")
        assert op_test.rpc_url == "https://sepolia.optimism.io"
        assert op_test.faucet_url == "https://console.optimism.io/faucet"

    @pytest.mark.asyncio
    async def test_set_network_with_literal_endpoint(self, network_registry: NetworkRegistry):
        network = await network_registry.set_network("http://localhost:8545")

        assert network.alias == "custom"
        assert network.rpc_url == "http://localhost:8545"
        assert network.faucet_url is None

    @pytest.mark.asyncio
    async def test_set_network_resets_tokens_and_min_balance(self, network_registry: NetworkRegistry):
        await network_registry.set_network("op")
        await network_registry.add_token_address(TOKEN_A)
        await network_registry.set_min_balance("5")

        network = await network_registry.set_network("base")

        assert network.tokens_addresses == []
        assert network.min_balance == "0.0015"
        assert network.gas_for_sweep is None

    @pytest.mark.asyncio
    async def test_add_then_remove_restores_list(self, network_registry: NetworkRegistry):
        await network_registry.set_network("op")
        await network_registry.add_token_address(TOKEN_A)
        before = (await network_registry.get_network()).tokens_addresses

        assert await network_registry.add_token_address(TOKEN_B) is True
        assert await network_registry.remove_token_address(TOKEN_B) is True

        assert (await network_registry.get_network()).tokens_addresses == before

    @pytest.mark.asyncio
    async def test_add_keeps_insertion_order(self, network_registry: NetworkRegistry):
        await network_registry.add_token_address(TOKEN_B)
        await network_registry.add_token_address(TOKEN_A)

        assert (await network_registry.get_network()).tokens_addresses == [TOKEN_B, TOKEN_A]

    @pytest.mark.asyncio
    async def test_add_rejects_duplicates(self, network_registry: NetworkRegistry):
        await network_registry.add_token_address(TOKEN_A)

        assert await network_registry.add_token_address(TOKEN_A.upper().replace("0X", "0x")) is False
        assert (await network_registry.get_network()).tokens_addresses == [TOKEN_A]

    @pytest.mark.asyncio
    async def test_remove_unknown_is_noop(self, network_registry: NetworkRegistry):
        await network_registry.add_token_address(TOKEN_A)

        assert await network_registry.remove_token_address(TOKEN_B) is False
        assert (await network_registry.get_network()).tokens_addresses == [TOKEN_A]

    @pytest.mark.asyncio
    async def test_set_min_balance(self, network_registry: NetworkRegistry, kv_store):
        await network_registry.set_network("op")

        network = await network_registry.set_min_balance("0.01")

        assert network.min_balance == "0.01"
        stored = await kv_store.get(NETWORK_KEY)
        assert stored["min_balance"] == "0.01"
        assert stored["rpc_url"] == "https://mainnet.optimism.io"

    @pytest.mark.asyncio
    async def test_set_min_balance_rejects_garbage(self, network_registry: NetworkRegistry):
        with pytest.raises(ValidationError):
            await network_registry.set_min_balance("lots")

    def test_valid_networks(self):
        assert {"op", "op_test", "map"} <= set(NetworkRegistry.valid_networks())
