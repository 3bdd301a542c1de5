from dishka import Provider, Scope, provide, FromComponent
from typing import Annotated
from core.environment.config import Settings
from core.redis.providers import KeyValueStore
from core.retry import RetryPolicy
from wallet.accounts import AccountRegistry
from wallet.networks import NetworkRegistry
from wallet.services import Web3Service
from wallet.transfers import TokenTransferExecutor
from wallet.usecases import (
    GetBalancesUseCase,
    GetManyBalancesUseCase,
    GetTokenInfoUseCase,
    TransferTokenUseCase,
)
import logging


class WalletProvider(Provider):
    """
    Provider for registry, balance and transfer dependencies.
    """

    component = "wallet"

    @provide(scope=Scope.APP)
    def get_retry_policy(
        self,
        settings: Annotated[Settings, FromComponent("environment")]
    ) -> RetryPolicy:
        return RetryPolicy.from_settings(settings)

    @provide(scope=Scope.APP)
    def get_web3_service(
        self,
        logger: Annotated[logging.Logger, FromComponent("logger")],
        retry_policy: Annotated[RetryPolicy, FromComponent("wallet")]
    ) -> Web3Service:
        """
        Provide Web3 service.

        Parameters
        ----------
        logger : logging.Logger
            Logger instance
        retry_policy : RetryPolicy
            Backoff policy for native balance reads

        Returns
        -------
        Web3Service
            Web3 service instance sharing clients across requests
        """
        return Web3Service(logger=logger, retry_policy=retry_policy)

    @provide(scope=Scope.APP)
    def get_network_registry(
        self,
        kv_store: Annotated[KeyValueStore, FromComponent("kv")],
        logger: Annotated[logging.Logger, FromComponent("logger")]
    ) -> NetworkRegistry:
        return NetworkRegistry(kv_store=kv_store, logger=logger)

    @provide(scope=Scope.APP)
    def get_account_registry(
        self,
        kv_store: Annotated[KeyValueStore, FromComponent("kv")],
        logger: Annotated[logging.Logger, FromComponent("logger")]
    ) -> AccountRegistry:
        return AccountRegistry(kv_store=kv_store, logger=logger)

    @provide(scope=Scope.APP)
    def get_transfer_executor(
        self,
        web3_service: Annotated[Web3Service, FromComponent("wallet")],
        logger: Annotated[logging.Logger, FromComponent("logger")],
        settings: Annotated[Settings, FromComponent("environment")]
    ) -> TokenTransferExecutor:
        """
        Provide token transfer executor.

        Parameters
        ----------
        web3_service : Web3Service
            Web3 service instance
        logger : logging.Logger
            Logger instance
        settings : Settings
            Application settings

        Returns
        -------
        TokenTransferExecutor
            Transfer executor instance
        """
        return TokenTransferExecutor(
            web3_service=web3_service,
            logger=logger,
            receipt_timeout=settings.receipt_timeout
        )

    @provide(scope=Scope.REQUEST)
    def get_balances_use_case(
        self,
        network_registry: Annotated[NetworkRegistry, FromComponent("wallet")],
        web3_service: Annotated[Web3Service, FromComponent("wallet")]
    ) -> GetBalancesUseCase:
        return GetBalancesUseCase(network_registry=network_registry, web3_service=web3_service)

    @provide(scope=Scope.REQUEST)
    def get_many_balances_use_case(
        self,
        network_registry: Annotated[NetworkRegistry, FromComponent("wallet")],
        web3_service: Annotated[Web3Service, FromComponent("wallet")]
    ) -> GetManyBalancesUseCase:
        return GetManyBalancesUseCase(network_registry=network_registry, web3_service=web3_service)

    @provide(scope=Scope.REQUEST)
    def get_token_info_use_case(
        self,
        network_registry: Annotated[NetworkRegistry, FromComponent("wallet")],
        web3_service: Annotated[Web3Service, FromComponent("wallet")]
    ) -> GetTokenInfoUseCase:
        return GetTokenInfoUseCase(network_registry=network_registry, web3_service=web3_service)

    @provide(scope=Scope.REQUEST)
    def get_transfer_use_case(
        self,
        account_registry: Annotated[AccountRegistry, FromComponent("wallet")],
        network_registry: Annotated[NetworkRegistry, FromComponent("wallet")],
        executor: Annotated[TokenTransferExecutor, FromComponent("wallet")]
    ) -> TransferTokenUseCase:
        """
        Provide transfer use case.

        Parameters
        ----------
        account_registry : AccountRegistry
            Registry holding signing keys
        network_registry : NetworkRegistry
            Registry holding the active network
        executor : TokenTransferExecutor
            Transfer executor

        Returns
        -------
        TransferTokenUseCase
            Transfer use case
        """
        return TransferTokenUseCase(
            account_registry=account_registry,
            network_registry=network_registry,
            executor=executor
        )
