from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from wallet.entities import TokenInfo
from wallet.services import Web3Service
from _wallet_helpers import HOLDER, RECIPIENT, TOKEN_A, TOKEN_B


class TestServiceAPI:

    @pytest.mark.asyncio
    async def test_root_endpoint(self, client: AsyncClient):
        """
        Test root endpoint returns correct application information.

        Parameters
        ----------
        client : AsyncClient
            Test client fixture
        """
        response = await client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "EVM Wallet Service"
        assert data["version"] == "0.1.0"
        assert data["endpoints"]["balances"] == "/api/balances"
        assert data["endpoints"]["transfers"] == "/api/transfers"

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}


class TestNetworkAPI:
    """
    Tests for the active network endpoints.
    """

    @pytest.mark.asyncio
    async def test_fallback_network(self, client: AsyncClient):
        response = await client.get("/api/network")
        assert response.status_code == 200
        data = response.json()
        assert data["alias"] == "op-sepolia"
        assert data["rpc_url"] == "https://sepolia.optimism.io"
        assert data["tokens_addresses"] == []
        assert data["min_balance"] == "0.0015"

    @pytest.mark.asyncio
    async def test_set_network(self, client: AsyncClient):
        response = await client.put("/api/network", json={"network": "op"})
        assert response.status_code == 200
        assert response.json()["rpc_url"] == "https://mainnet.optimism.io"

        response = await client.get("/api/network")
        assert response.json()["alias"] == "optimism"

    @pytest.mark.asyncio
    async def test_set_network_rejects_empty_value(self, client: AsyncClient):
        response = await client.put("/api/network", json={"network": ""})
        assert response.status_code == 422
        data = response.json()
        assert data["status"] == "error"
        assert data["errors"][0]["field"] == "network"

    @pytest.mark.asyncio
    async def test_valid_networks(self, client: AsyncClient):
        response = await client.get("/api/network/valid")
        assert response.status_code == 200
        assert "op_test" in response.json()["networks"]

    @pytest.mark.asyncio
    async def test_token_addresses(self, client: AsyncClient):
        """
        Tracked tokens can be added once and removed.

        Parameters
        ----------
        client : AsyncClient
            Test client fixture
        """
        response = await client.post("/api/network/tokens", json={"token_address": TOKEN_A})
        assert response.json()["changed"] is True

        response = await client.post("/api/network/tokens", json={"token_address": TOKEN_A})
        assert response.json()["changed"] is False

        await client.post("/api/network/tokens", json={"token_address": TOKEN_B})
        response = await client.delete(f"/api/network/tokens/{TOKEN_A}")
        assert response.status_code == 200
        assert response.json()["changed"] is True

        response = await client.get("/api/network")
        assert response.json()["tokens_addresses"] == [TOKEN_B]

    @pytest.mark.asyncio
    async def test_add_token_rejects_invalid_address(self, client: AsyncClient):
        response = await client.post("/api/network/tokens", json={"token_address": "0x123"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_min_balance(self, client: AsyncClient):
        response = await client.put("/api/network/min-balance", json={"min_balance": "0.5"})
        assert response.status_code == 200
        assert response.json()["min_balance"] == "0.5"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("min_balance", ["-1", "abc"])
    async def test_min_balance_rejects_invalid_values(self, client: AsyncClient, min_balance):
        response = await client.put("/api/network/min-balance", json={"min_balance": min_balance})
        assert response.status_code == 422


class TestAccountsAPI:
    """
    Tests for account generation and listing.
    """

    @pytest.mark.asyncio
    async def test_no_admin(self, client: AsyncClient):
        response = await client.get("/api/accounts/admin")
        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_generate_admin_once(self, client: AsyncClient):
        response = await client.post("/api/accounts/admin")
        assert response.status_code == 200
        created = response.json()
        assert created["created"] is True
        assert created["account"]["role"] == "admin"

        response = await client.post("/api/accounts/admin")
        assert response.json()["created"] is False

        response = await client.get("/api/accounts/admin")
        data = response.json()
        assert data["address"] == created["account"]["address"]
        assert data["private_key"] is None

    @pytest.mark.asyncio
    async def test_generate_and_list_accounts(self, client: AsyncClient):
        first = (await client.post("/api/accounts", json={})).json()
        second = (await client.post("/api/accounts", json={"store_private_key": True})).json()
        assert first["account"]["private_key"] is not None
        assert second["account"]["role"] == "user"

        response = await client.get("/api/accounts")
        data = response.json()
        assert data["total"] == 2
        assert sorted(data["accounts"]) == sorted([first["account"]["address"], second["account"]["address"]])

    @pytest.mark.asyncio
    async def test_rejects_admin_with_stored_key(self, client: AsyncClient):
        response = await client.post("/api/accounts", json={"is_admin": True, "store_private_key": True})
        assert response.status_code == 422


class TestBalancesAPI:
    """
    Tests for balance endpoints. RPC calls are mocked.
    """

    @pytest.mark.asyncio
    async def test_get_balances(self, client: AsyncClient):
        with patch.object(Web3Service, "get_native_balance", AsyncMock(return_value="1.5")):
            response = await client.get(f"/api/balances/{HOLDER}")

        assert response.status_code == 200
        data = response.json()
        assert data["address"] == HOLDER
        assert data["network"] == "op-sepolia"
        assert data["native_balance"] == "1.5"
        assert data["funded"] is True
        assert data["token_balances"] == {}
        assert data["token_errors"] == {}

    @pytest.mark.asyncio
    async def test_get_balances_below_min_balance(self, client: AsyncClient):
        with patch.object(Web3Service, "get_native_balance", AsyncMock(return_value="0.001")):
            response = await client.get(f"/api/balances/{HOLDER}")

        assert response.json()["funded"] is False

    @pytest.mark.asyncio
    async def test_get_balances_invalid_address(self, client: AsyncClient):
        response = await client.get("/api/balances/invalid_address")
        assert response.status_code == 400
        assert response.json()["message"] == "error.address.invalid"

    @pytest.mark.asyncio
    async def test_get_many_balances(self, client: AsyncClient):
        with patch.object(Web3Service, "get_native_balance", AsyncMock(side_effect=["2.0", "0.0"])):
            response = await client.post("/api/balances", json={"addresses": [HOLDER, RECIPIENT]})

        assert response.status_code == 200
        balances = response.json()["balances"]
        assert [item["address"] for item in balances] == [HOLDER, RECIPIENT]
        assert [item["funded"] for item in balances] == [True, False]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("addresses", [[], ["0x123"]])
    async def test_get_many_balances_validation(self, client: AsyncClient, addresses):
        response = await client.post("/api/balances", json={"addresses": addresses})
        assert response.status_code == 422


class TestTokensAPI:

    @pytest.mark.asyncio
    async def test_token_info(self, client: AsyncClient):
        info = TokenInfo(address=TOKEN_A, name="Tether USD", symbol="USDT", decimals=6)
        with patch.object(Web3Service, "get_token_info", AsyncMock(return_value=info)):
            response = await client.get(f"/api/tokens/{TOKEN_A}")

        assert response.status_code == 200
        assert response.json() == {"address": TOKEN_A, "name": "Tether USD", "symbol": "USDT", "decimals": 6}

    @pytest.mark.asyncio
    async def test_token_info_unavailable(self, client: AsyncClient):
        with patch.object(Web3Service, "get_token_info", AsyncMock(return_value=None)):
            response = await client.get(f"/api/tokens/{TOKEN_A}")

        assert response.status_code == 404
        assert response.json()["message"] == "error.token.info_unavailable"


class TestTransfersAPI:

    @pytest.mark.asyncio
    async def test_unknown_sender(self, client: AsyncClient):
        payload = {
            "from_address": HOLDER,
            "contract_address": TOKEN_A,
            "to_address": RECIPIENT,
            "amount": "1"
        }

        response = await client.post("/api/transfers", json=payload)
        assert response.status_code == 404
        assert response.json()["message"] == "error.account.not_found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field, value", [
        ("amount", "0"),
        ("amount", "-1"),
        ("to_address", "invalid_address"),
    ])
    async def test_transfer_validation(self, client: AsyncClient, field, value):
        payload = {
            "from_address": HOLDER,
            "contract_address": TOKEN_A,
            "to_address": RECIPIENT,
            "amount": "1"
        }
        payload[field] = value

        response = await client.post("/api/transfers", json=payload)
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == field
