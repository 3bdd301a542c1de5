from fnmatch import fnmatchcase
from unittest.mock import AsyncMock, MagicMock

RPC_URL = "https://rpc.test"
HOLDER = "0x" + "11" * 20
RECIPIENT = "0x" + "22" * 20
TOKEN_A = "0x" + "aa" * 20
TOKEN_B = "0x" + "bb" * 20
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


class FakeRedis:
    """In-memory stand-in for the subset of redis.asyncio.Redis used by the store."""

    def __init__(self):
        self.data: dict[str, str] = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = value
        return True

    async def mget(self, keys):
        return [self.data.get(key) for key in keys]

    async def scan_iter(self, match=None, count=None):
        for key in list(self.data):
            if match is None or fnmatchcase(key, match):
                yield key

    async def ping(self):
        return True

    async def aclose(self):
        pass


def make_token_contract(balance=0, decimals=18, name="Token", symbol="TKN", error=None):
    """Mock ERC-20 contract answering balanceOf/decimals/name/symbol."""
    contract = MagicMock()
    if error is not None:
        contract.functions.balanceOf.return_value.call = AsyncMock(side_effect=error)
    else:
        contract.functions.balanceOf.return_value.call = AsyncMock(return_value=balance)
    contract.functions.decimals.return_value.call = AsyncMock(return_value=decimals)
    contract.functions.name.return_value.call = AsyncMock(return_value=name)
    contract.functions.symbol.return_value.call = AsyncMock(return_value=symbol)
    return contract


def make_web3_client(native_balance=0, contracts=None):
    """Mock AsyncWeb3 client; contracts are looked up by lowercase address."""
    contracts = {address.lower(): contract for address, contract in (contracts or {}).items()}
    client = MagicMock()
    client.eth.get_balance = AsyncMock(return_value=native_balance)
    client.eth.contract.side_effect = lambda address, abi: contracts[address.lower()]
    return client
