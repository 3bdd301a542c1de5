import logging
import os
import pytest
import pytest_asyncio
from dishka import Provider, Scope, make_async_container, provide
from dishka.integrations.fastapi import FastapiProvider
from httpx import AsyncClient, ASGITransport
from redis.asyncio import Redis

# Set test environment variables before imports
os.environ['REDIS_HOST'] = 'localhost'
os.environ['REDIS_PORT'] = '6379'
os.environ['REDIS_DB'] = '0'
os.environ['REDIS_PASSWORD'] = ''

from core.environment.config import Settings  # noqa: E402
from core.environment.providers import EnvironmentProvider  # noqa: E402
from core.logging.providers import LoggerProvider  # noqa: E402
from core.redis.providers import KeyValueProvider, KeyValueStore  # noqa: E402
from core.retry import RetryPolicy  # noqa: E402
from wallet.accounts import AccountRegistry  # noqa: E402
from wallet.networks import NetworkRegistry  # noqa: E402
from wallet.providers import WalletProvider  # noqa: E402
from wallet.services import Web3Service  # noqa: E402
from _wallet_helpers import RPC_URL, FakeRedis  # noqa: E402


class FakeRedisProvider(Provider):
    component = "redis"

    def __init__(self, redis_client: FakeRedis):
        super().__init__()
        self._redis = redis_client

    @provide(scope=Scope.APP)
    def get_redis(self) -> Redis:
        return self._redis


@pytest.fixture
def logger():
    return logging.getLogger("wallet.tests")


@pytest.fixture
def retry_policy():
    return RetryPolicy(max_attempts=3, base_delay=0, multiplier=2)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def kv_store(fake_redis):
    return KeyValueStore(fake_redis, namespace="test")


@pytest.fixture
def network_registry(kv_store, logger):
    return NetworkRegistry(kv_store=kv_store, logger=logger)


@pytest.fixture
def account_registry(kv_store, logger):
    return AccountRegistry(kv_store=kv_store, logger=logger)


@pytest.fixture
def web3_service_factory(logger, retry_policy):
    """Build a Web3Service whose RPC_URL client is the given mock."""
    def factory(client):
        return Web3Service(logger=logger, retry_policy=retry_policy, web3_clients={RPC_URL: client})
    return factory


@pytest_asyncio.fixture
async def client(fake_redis):
    """
    Fixture for async test client backed by the in-memory Redis.

    Parameters
    ----------
    fake_redis : FakeRedis
        In-memory Redis double

    Yields
    ------
    AsyncClient
        Async HTTP client for testing
    """
    from main import create_app

    container = make_async_container(
        FastapiProvider(),
        EnvironmentProvider(Settings(rpc_retry_attempts=1, rpc_retry_base_delay=0)),
        LoggerProvider(),
        FakeRedisProvider(fake_redis),
        KeyValueProvider(),
        WalletProvider()
    )
    app = create_app(container)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await container.close()
