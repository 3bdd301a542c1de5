from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from wallet.utils import is_valid_address, is_valid_private_key, to_decimal

NetworkAlias = Literal[
    "mainnet", "optimism", "arbitrum", "base", "sepolia", "op-sepolia", "map", "custom"
]
AccountRole = Literal["admin", "user"]

DEFAULT_MIN_BALANCE = "0.0015"
ZERO_BALANCE = "0"


def _validate_amount(value: str) -> str:
    number = to_decimal(value)
    if number < 0:
        raise ValueError("Amount must be non-negative")
    return str(value).strip()


class NetworkConfig(BaseModel):
    """
    Entity representing the blockchain network to operate against.

    Attributes
    ----------
    alias : NetworkAlias
        Known network name, ``custom`` for a literal RPC endpoint
    rpc_url : str
        JSON-RPC endpoint
    faucet_url : str | None
        Faucet service URL if the network has one
    tokens_addresses : list[str]
        Tracked token contracts; balances are keyed by these strings
    min_balance : str
        Minimum native balance (decimal string) considered funded
    gas_for_sweep : str | None
        Default native amount reserved for a sweep
    """
    alias: NetworkAlias
    rpc_url: str = Field(..., min_length=1)
    faucet_url: str | None = None
    tokens_addresses: list[str] = Field(default_factory=list)
    min_balance: str = DEFAULT_MIN_BALANCE
    gas_for_sweep: str | None = None

    model_config = ConfigDict(from_attributes=True, extra="forbid")

    @field_validator("rpc_url")
    @classmethod
    def validate_rpc_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("RPC URL must not be empty")
        return v

    @field_validator("min_balance")
    @classmethod
    def validate_min_balance(cls, v: str) -> str:
        return _validate_amount(v)

    @field_validator("gas_for_sweep")
    @classmethod
    def validate_gas_for_sweep(cls, v: str | None) -> str | None:
        return None if v is None else _validate_amount(v)

    def is_funded(self, native_balance: str) -> bool:
        return to_decimal(native_balance) >= to_decimal(self.min_balance)


class AccountRecord(BaseModel):
    """
    Entity representing an address under management.

    Attributes
    ----------
    address : str
        0x-prefixed 40 hex characters
    private_key : str | None
        64 hex characters, only present when the registry holds it
    role : AccountRole
        admin (singleton) or user
    """
    address: str
    private_key: str | None = None
    role: AccountRole = "user"

    model_config = ConfigDict(from_attributes=True)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        if not is_valid_address(v):
            raise ValueError("Invalid Ethereum address format")
        return v

    @field_validator("private_key")
    @classmethod
    def validate_private_key(cls, v: str | None) -> str | None:
        if v is not None and not is_valid_private_key(v):
            raise ValueError("Invalid private key format")
        return v


class AccountCreation(BaseModel):
    """
    Result of an account generation request.

    ``created`` is False when the request was a no-op, e.g. an admin already exists.
    """
    created: bool
    message: str
    account: AccountRecord | None = None


class TokenBalance(BaseModel):
    """
    Balance of a single token, or the reason it could not be read.

    Attributes
    ----------
    token_address : str
        Token contract address as configured
    balance : str
        Decimal balance, ``"0"`` when the query failed
    error : str | None
        Failure description, None on success
    """
    token_address: str
    balance: str = ZERO_BALANCE
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BalanceRecord(BaseModel):
    """
    Native and token balances of one address.

    Attributes
    ----------
    address : str
        Queried address
    native_balance : str
        Native balance in ether units
    tokens : dict[str, TokenBalance]
        Per-token results keyed by token contract address
    """
    address: str
    native_balance: str
    tokens: dict[str, TokenBalance] = Field(default_factory=dict)

    @computed_field
    @property
    def token_balances(self) -> dict[str, str]:
        return {token: result.balance for token, result in self.tokens.items()}


class AddressBalance(BaseModel):
    address: str
    balance: str


class TokenInfo(BaseModel):
    address: str
    name: str
    symbol: str
    decimals: int


class TransferResult(BaseModel):
    """
    Summary of a confirmed token transfer.

    Attributes
    ----------
    transaction_hash : str
        0x-prefixed transaction hash
    status : int
        Receipt status, 1 on success
    from_address : str
        Sender as reported by the receipt
    to_address : str
        Transaction target as reported by the receipt
    amount : str
        Transferred amount from the first Transfer event, ``"0"`` if absent
    """
    transaction_hash: str
    status: int
    from_address: str
    to_address: str | None
    amount: str = ZERO_BALANCE
