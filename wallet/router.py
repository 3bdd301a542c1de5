from fastapi import APIRouter
from dishka.integrations.fastapi import inject
from dishka import FromComponent
from typing import Annotated
from core.exceptions import InvalidAddressException
from wallet.accounts import AccountRegistry
from wallet.networks import NetworkRegistry
from wallet.schemas import (
    AccountCreationResponse,
    AccountResponse,
    AccountsResponse,
    BalanceResponse,
    GenerateAccountRequest,
    GetManyBalancesRequest,
    ManyBalancesResponse,
    MessageResponse,
    MinBalanceRequest,
    NetworkResponse,
    SetNetworkRequest,
    TokenAddressRequest,
    TokenInfoResponse,
    TransferRequest,
    TransferResponse,
    ValidNetworksResponse,
)
from wallet.usecases import (
    GetBalancesUseCase,
    GetManyBalancesUseCase,
    GetTokenInfoUseCase,
    TransferTokenUseCase,
)
from wallet.utils import is_valid_address

router = APIRouter(
    prefix="/api",
    tags=["Wallet"]
)


def _require_address(address: str) -> str:
    if not is_valid_address(address):
        raise InvalidAddressException()
    return address


@router.get("/network", response_model=NetworkResponse)
@inject
async def get_network(
    registry: Annotated[NetworkRegistry, FromComponent("wallet")]
) -> NetworkResponse:
    """
    Get the active network, or the fallback network when none is set.
    """
    network = await registry.get_network()
    return NetworkResponse.model_validate(network, from_attributes=True)


@router.put("/network", response_model=NetworkResponse)
@inject
async def set_network(
    request: SetNetworkRequest,
    registry: Annotated[NetworkRegistry, FromComponent("wallet")]
) -> NetworkResponse:
    """
    Replace the active network.

    Parameters
    ----------
    request : SetNetworkRequest
        Network alias or RPC URL
    registry : NetworkRegistry
        Network registry

    Returns
    -------
    NetworkResponse
        New network, with no tracked tokens
    """
    network = await registry.set_network(request.network)
    return NetworkResponse.model_validate(network, from_attributes=True)


@router.get("/network/valid", response_model=ValidNetworksResponse)
async def get_valid_networks() -> ValidNetworksResponse:
    return ValidNetworksResponse(networks=NetworkRegistry.valid_networks())


@router.post("/network/tokens", response_model=MessageResponse)
@inject
async def add_token_address(
    request: TokenAddressRequest,
    registry: Annotated[NetworkRegistry, FromComponent("wallet")]
) -> MessageResponse:
    added = await registry.add_token_address(request.token_address)
    message = "Token address added successfully" if added else "Token address already tracked"
    return MessageResponse(message=message, changed=added)


@router.delete("/network/tokens/{token_address}", response_model=MessageResponse)
@inject
async def remove_token_address(
    token_address: str,
    registry: Annotated[NetworkRegistry, FromComponent("wallet")]
) -> MessageResponse:
    removed = await registry.remove_token_address(token_address)
    message = "Token address removed successfully" if removed else "Token address was not tracked"
    return MessageResponse(message=message, changed=removed)


@router.put("/network/min-balance", response_model=NetworkResponse)
@inject
async def set_min_balance(
    request: MinBalanceRequest,
    registry: Annotated[NetworkRegistry, FromComponent("wallet")]
) -> NetworkResponse:
    network = await registry.set_min_balance(request.min_balance)
    return NetworkResponse.model_validate(network, from_attributes=True)


@router.get("/accounts", response_model=AccountsResponse)
@inject
async def list_accounts(
    registry: Annotated[AccountRegistry, FromComponent("wallet")]
) -> AccountsResponse:
    accounts = await registry.list_accounts()
    return AccountsResponse(accounts=accounts, total=len(accounts))


@router.post("/accounts", response_model=AccountCreationResponse)
@inject
async def generate_account(
    request: GenerateAccountRequest,
    registry: Annotated[AccountRegistry, FromComponent("wallet")]
) -> AccountCreationResponse:
    """
    Generate an account.

    The private key is always returned; it is stored only when
    ``store_private_key`` is set.

    Parameters
    ----------
    request : GenerateAccountRequest
        Account options
    registry : AccountRegistry
        Account registry

    Returns
    -------
    AccountCreationResponse
        Generated account, or ``created=false`` if the admin slot is taken
    """
    if request.store_private_key:
        creation = await registry.generate_account_with_key()
    else:
        creation = await registry.generate_account(is_admin=request.is_admin)
    return AccountCreationResponse.model_validate(creation, from_attributes=True)


@router.get("/accounts/admin", response_model=AccountResponse | None)
@inject
async def get_admin(
    registry: Annotated[AccountRegistry, FromComponent("wallet")]
) -> AccountResponse | None:
    """
    Get the admin address. The private key is never exposed here.
    """
    admin = await registry.get_admin()
    if admin is None:
        return None
    return AccountResponse(address=admin.address, role=admin.role)


@router.post("/accounts/admin", response_model=AccountCreationResponse)
@inject
async def generate_admin(
    registry: Annotated[AccountRegistry, FromComponent("wallet")]
) -> AccountCreationResponse:
    creation = await registry.generate_admin()
    return AccountCreationResponse.model_validate(creation, from_attributes=True)


@router.get("/balances/{address}", response_model=BalanceResponse)
@inject
async def get_balances(
    address: str,
    use_case: Annotated[GetBalancesUseCase, FromComponent("wallet")]
) -> BalanceResponse:
    """
    Get native and tracked token balances of an address on the active network.

    Parameters
    ----------
    address : str
        Wallet address
    use_case : GetBalancesUseCase
        Use case for getting balances

    Returns
    -------
    BalanceResponse
        Balance information
    """
    return await use_case(address=_require_address(address))


@router.post("/balances", response_model=ManyBalancesResponse)
@inject
async def get_many_balances(
    request: GetManyBalancesRequest,
    use_case: Annotated[GetManyBalancesUseCase, FromComponent("wallet")]
) -> ManyBalancesResponse:
    return await use_case(addresses=request.addresses)


@router.get("/tokens/{contract_address}", response_model=TokenInfoResponse)
@inject
async def get_token_info(
    contract_address: str,
    use_case: Annotated[GetTokenInfoUseCase, FromComponent("wallet")]
) -> TokenInfoResponse:
    return await use_case(contract_address=_require_address(contract_address))


@router.post("/transfers", response_model=TransferResponse)
@inject
async def transfer_tokens(
    request: TransferRequest,
    use_case: Annotated[TransferTokenUseCase, FromComponent("wallet")]
) -> TransferResponse:
    """
    Transfer tokens from a registry account on the active network.

    Parameters
    ----------
    request : TransferRequest
        Sender, token, recipient and amount
    use_case : TransferTokenUseCase
        Use case for transfers

    Returns
    -------
    TransferResponse
        Confirmed transaction summary
    """
    return await use_case(
        from_address=request.from_address,
        contract_address=request.contract_address,
        to_address=request.to_address,
        amount=request.amount
    )
