from core.exceptions import AccountNotFoundException, TokenInfoUnavailableException
from wallet.accounts import AccountRegistry
from wallet.networks import NetworkRegistry
from wallet.schemas import (
    AddressBalanceResponse,
    BalanceResponse,
    ManyBalancesResponse,
    TokenInfoResponse,
    TransferResponse,
)
from wallet.services import Web3Service
from wallet.transfers import TokenTransferExecutor


class GetBalancesUseCase:
    """
    Use case for getting native and token balances on the active network.

    Parameters
    ----------
    network_registry : NetworkRegistry
        Registry holding the active network
    web3_service : Web3Service
        Web3 service instance
    """

    def __init__(self, network_registry: NetworkRegistry, web3_service: Web3Service):
        self.network_registry = network_registry
        self.web3_service = web3_service

    async def __call__(self, address: str) -> BalanceResponse:
        """
        Execute use case.

        Parameters
        ----------
        address : str
            Wallet address

        Returns
        -------
        BalanceResponse
            Balance response
        """
        network = await self.network_registry.get_network()
        record = await self.web3_service.get_balances(network, address)

        return BalanceResponse(
            address=record.address,
            network=network.alias,
            native_balance=record.native_balance,
            funded=network.is_funded(record.native_balance),
            token_balances=record.token_balances,
            token_errors={
                token: result.error for token, result in record.tokens.items() if not result.ok
            }
        )


class GetManyBalancesUseCase:
    """
    Use case for getting native balances of many addresses on the active network.
    """

    def __init__(self, network_registry: NetworkRegistry, web3_service: Web3Service):
        self.network_registry = network_registry
        self.web3_service = web3_service

    async def __call__(self, addresses: list[str]) -> ManyBalancesResponse:
        network = await self.network_registry.get_network()
        balances = await self.web3_service.get_balances_for_many(network, addresses)

        return ManyBalancesResponse(
            network=network.alias,
            balances=[
                AddressBalanceResponse(
                    address=item.address,
                    balance=item.balance,
                    funded=network.is_funded(item.balance)
                )
                for item in balances
            ]
        )


class GetTokenInfoUseCase:
    def __init__(self, network_registry: NetworkRegistry, web3_service: Web3Service):
        self.network_registry = network_registry
        self.web3_service = web3_service

    async def __call__(self, contract_address: str) -> TokenInfoResponse:
        network = await self.network_registry.get_network()
        info = await self.web3_service.get_token_info(network.rpc_url, contract_address)
        if info is None:
            raise TokenInfoUnavailableException()
        return TokenInfoResponse.model_validate(info, from_attributes=True)


class TransferTokenUseCase:
    """
    Use case for transferring tokens from an account held by the registry.

    Parameters
    ----------
    account_registry : AccountRegistry
        Registry holding the signing keys
    network_registry : NetworkRegistry
        Registry holding the active network
    executor : TokenTransferExecutor
        Transfer executor
    """

    def __init__(
        self,
        account_registry: AccountRegistry,
        network_registry: NetworkRegistry,
        executor: TokenTransferExecutor
    ):
        self.account_registry = account_registry
        self.network_registry = network_registry
        self.executor = executor

    async def __call__(
        self,
        from_address: str,
        contract_address: str,
        to_address: str,
        amount: str
    ) -> TransferResponse:
        """
        Execute use case.

        Parameters
        ----------
        from_address : str
            Sender registered with a stored private key
        contract_address : str
            Token contract address
        to_address : str
            Recipient address
        amount : str
            Human-readable amount

        Returns
        -------
        TransferResponse
            Transfer summary

        Raises
        ------
        AccountNotFoundException
            If no private key is stored for from_address
        """
        private_key = await self.account_registry.get_signing_key(from_address)
        if private_key is None:
            raise AccountNotFoundException()

        network = await self.network_registry.get_network()
        result = await self.executor.transfer(
            private_key=private_key,
            rpc_url=network.rpc_url,
            contract_address=contract_address,
            to_address=to_address,
            amount=amount
        )
        return TransferResponse.model_validate(result, from_attributes=True)
