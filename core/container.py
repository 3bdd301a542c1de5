from dishka import AsyncContainer, Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider

from core.environment.providers import EnvironmentProvider
from core.redis.providers import RedisProvider, KeyValueProvider
from core.logging.providers import LoggerProvider
from wallet.providers import WalletProvider


def create_container(*extra_providers: Provider) -> AsyncContainer:
    """
    Build the application container.

    Parameters
    ----------
    *extra_providers : Provider
        Additional providers, e.g. ``FastapiProvider`` for the HTTP app

    Returns
    -------
    AsyncContainer
        Container with environment, logging, storage and wallet components
    """
    return make_async_container(
        *extra_providers,
        EnvironmentProvider(),
        LoggerProvider(),
        RedisProvider(),
        KeyValueProvider(),
        WalletProvider()
    )


container = create_container(FastapiProvider())
