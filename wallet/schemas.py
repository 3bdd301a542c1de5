from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from wallet.entities import AccountRole, NetworkAlias
from wallet.utils import is_valid_address, to_decimal


def _check_address(v: str) -> str:
    if not is_valid_address(v):
        raise ValueError('Invalid Ethereum address format')
    return v


def _check_amount(v: str, allow_zero: bool = True) -> str:
    number = to_decimal(v)
    if number < 0 or (number == 0 and not allow_zero):
        raise ValueError('Amount out of range')
    return v.strip()


class SetNetworkRequest(BaseModel):
    """
    Request schema for switching the active network.

    Attributes
    ----------
    network : str
        Network alias (see ``/api/network/valid``) or a literal RPC URL
    """
    network: str = Field(..., min_length=1, description="Network alias or RPC URL")


class TokenAddressRequest(BaseModel):
    token_address: str = Field(..., description="Token contract address")

    @field_validator('token_address')
    @classmethod
    def validate_address(cls, v: str) -> str:
        return _check_address(v)


class MinBalanceRequest(BaseModel):
    min_balance: str = Field(..., description="Minimum native balance, decimal string")

    @field_validator('min_balance')
    @classmethod
    def validate_min_balance(cls, v: str) -> str:
        return _check_amount(v)


class NetworkResponse(BaseModel):
    """
    Response schema for the active network.
    """
    alias: NetworkAlias
    rpc_url: str
    faucet_url: str | None
    tokens_addresses: list[str]
    min_balance: str
    gas_for_sweep: str | None

    model_config = ConfigDict(from_attributes=True)


class ValidNetworksResponse(BaseModel):
    networks: list[str]


class MessageResponse(BaseModel):
    message: str
    changed: bool


class GenerateAccountRequest(BaseModel):
    """
    Request schema for generating an account.

    Attributes
    ----------
    is_admin : bool
        Register the address in the admin slot
    store_private_key : bool
        Persist the private key in the registry (user accounts only)
    """
    is_admin: bool = False
    store_private_key: bool = False

    @model_validator(mode='after')
    def validate_combination(self) -> 'GenerateAccountRequest':
        if self.is_admin and self.store_private_key:
            raise ValueError('Use /api/accounts/admin to create an admin with a stored key')
        return self


class AccountResponse(BaseModel):
    address: str
    private_key: str | None = None
    role: AccountRole

    model_config = ConfigDict(from_attributes=True)


class AccountCreationResponse(BaseModel):
    created: bool
    message: str
    account: AccountResponse | None = None

    model_config = ConfigDict(from_attributes=True)


class AccountsResponse(BaseModel):
    accounts: list[str]
    total: int


class BalanceResponse(BaseModel):
    """
    Response schema for a balance query.

    Attributes
    ----------
    address : str
        Wallet address
    network : str
        Network alias
    native_balance : str
        Native balance in ether units
    funded : bool
        Native balance reaches the network minimum balance
    token_balances : dict[str, str]
        Balance per tracked token, ``"0"`` when unavailable
    token_errors : dict[str, str]
        Failure reason per token that could not be read
    """
    address: str
    network: str
    native_balance: str
    funded: bool
    token_balances: dict[str, str]
    token_errors: dict[str, str]


class GetManyBalancesRequest(BaseModel):
    addresses: list[str] = Field(..., min_length=1, description="Wallet addresses")

    @field_validator('addresses')
    @classmethod
    def validate_addresses(cls, v: list[str]) -> list[str]:
        return [_check_address(address) for address in v]


class AddressBalanceResponse(BaseModel):
    address: str
    balance: str
    funded: bool


class ManyBalancesResponse(BaseModel):
    network: str
    balances: list[AddressBalanceResponse]


class TokenInfoResponse(BaseModel):
    address: str
    name: str
    symbol: str
    decimals: int

    model_config = ConfigDict(from_attributes=True)


class TransferRequest(BaseModel):
    """
    Request schema for a token transfer signed by a registry account.

    Attributes
    ----------
    from_address : str
        Admin or user address whose private key is stored
    contract_address : str
        Token contract address
    to_address : str
        Recipient address
    amount : str
        Human-readable amount, must be positive
    """
    from_address: str
    contract_address: str
    to_address: str
    amount: str

    @field_validator('from_address', 'contract_address', 'to_address')
    @classmethod
    def validate_address(cls, v: str) -> str:
        return _check_address(v)

    @field_validator('amount')
    @classmethod
    def validate_amount(cls, v: str) -> str:
        return _check_amount(v, allow_zero=False)


class TransferResponse(BaseModel):
    transaction_hash: str
    status: int
    from_address: str
    to_address: str | None
    amount: str

    model_config = ConfigDict(from_attributes=True)
