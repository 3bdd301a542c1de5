import asyncio
import logging
from web3 import AsyncWeb3
from web3.contract import AsyncContract

from core.retry import RetryPolicy
from wallet.abi import ERC20_ABI
from wallet.entities import AddressBalance, BalanceRecord, NetworkConfig, TokenBalance, TokenInfo
from wallet.utils import format_ether, format_units, truncate_address


async def _gather_or_raise(*aws):
    # siblings run to completion before the first failure is raised
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


class Web3Service:
    """
    Service for reading balances and token data from EVM networks.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance
    retry_policy : RetryPolicy
        Backoff policy for native balance reads
    web3_clients : dict[str, AsyncWeb3] | None
        Already connected clients keyed by RPC URL
    """

    def __init__(
        self,
        logger: logging.Logger,
        retry_policy: RetryPolicy,
        web3_clients: dict[str, AsyncWeb3] | None = None
    ):
        self.logger = logger
        self.retry_policy = retry_policy
        self.web3_clients = web3_clients if web3_clients is not None else {}

    def get_client(self, rpc_url: str) -> AsyncWeb3:
        """
        Get Web3 client for an RPC endpoint, creating it on first use.

        Parameters
        ----------
        rpc_url : str
            JSON-RPC endpoint

        Returns
        -------
        AsyncWeb3
            Web3 client instance
        """
        if rpc_url not in self.web3_clients:
            self.web3_clients[rpc_url] = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        return self.web3_clients[rpc_url]

    def get_token_contract(self, rpc_url: str, token_address: str) -> AsyncContract:
        web3 = self.get_client(rpc_url)
        return web3.eth.contract(address=AsyncWeb3.to_checksum_address(token_address), abi=ERC20_ABI)

    async def get_native_balance(self, rpc_url: str, address: str) -> str:
        """
        Get native balance in ether units.

        Transient RPC failures are retried with the retry policy; the last
        failure is raised.

        Parameters
        ----------
        rpc_url : str
            JSON-RPC endpoint
        address : str
            Wallet address

        Returns
        -------
        str
            Decimal balance
        """
        web3 = self.get_client(rpc_url)
        checksum_address = AsyncWeb3.to_checksum_address(address)
        balance_wei = await self.retry_policy.call(
            web3.eth.get_balance, checksum_address, logger=self.logger
        )
        return format_ether(balance_wei)

    async def get_token_balance(self, rpc_url: str, address: str, token_address: str) -> TokenBalance:
        """
        Get ERC-20 balance, never raising.

        Parameters
        ----------
        rpc_url : str
            JSON-RPC endpoint
        address : str
            Holder address
        token_address : str
            Token contract address, may be empty

        Returns
        -------
        TokenBalance
            Balance scaled by the token decimals, or ``"0"`` with the error
        """
        if not token_address:
            return TokenBalance(token_address=token_address, error="token address is not set")

        try:
            contract = self.get_token_contract(rpc_url, token_address)
            balance, decimals = await _gather_or_raise(
                contract.functions.balanceOf(AsyncWeb3.to_checksum_address(address)).call(),
                contract.functions.decimals().call(),
            )
            return TokenBalance(token_address=token_address, balance=format_units(balance, decimals))
        except Exception as e:
            self.logger.warning(
                f"Error fetching balance of token {token_address} for {truncate_address(address)}: {e}"
            )
            return TokenBalance(token_address=token_address, error=str(e) or type(e).__name__)

    async def get_balances(self, network: NetworkConfig, address: str) -> BalanceRecord:
        """
        Get native balance and every tracked token balance of an address.

        All queries run concurrently. Token failures are reported per token and
        never abort the other queries; a native balance failure is raised.

        Parameters
        ----------
        network : NetworkConfig
            Network to query
        address : str
            Wallet address

        Returns
        -------
        BalanceRecord
            Aggregated balances keyed by token address
        """
        native_balance, *token_results = await asyncio.gather(
            self.get_native_balance(network.rpc_url, address),
            *(
                self.get_token_balance(network.rpc_url, address, token_address)
                for token_address in network.tokens_addresses
            ),
        )
        return BalanceRecord(
            address=address,
            native_balance=native_balance,
            tokens={result.token_address: result for result in token_results},
        )

    async def get_balances_for_many(self, network: NetworkConfig, addresses: list[str]) -> list[AddressBalance]:
        """
        Get native balances of many addresses concurrently, in input order.
        """
        balances = await asyncio.gather(
            *(self.get_native_balance(network.rpc_url, address) for address in addresses)
        )
        return [
            AddressBalance(address=address, balance=balance)
            for address, balance in zip(addresses, balances)
        ]

    async def get_token_info(self, rpc_url: str, contract_address: str) -> TokenInfo | None:
        """
        Read name, symbol and decimals of a token.

        Parameters
        ----------
        rpc_url : str
            JSON-RPC endpoint
        contract_address : str
            Token contract address

        Returns
        -------
        TokenInfo | None
            Token metadata, None when it cannot be read
        """
        try:
            contract = self.get_token_contract(rpc_url, contract_address)
            name, symbol, decimals = await _gather_or_raise(
                contract.functions.name().call(),
                contract.functions.symbol().call(),
                contract.functions.decimals().call(),
            )
        except Exception as e:
            self.logger.warning(f"Error fetching ERC20 info for {contract_address}: {e}")
            return None
        return TokenInfo(address=contract_address, name=name, symbol=symbol, decimals=decimals)
