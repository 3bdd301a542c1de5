import re
from decimal import Decimal, InvalidOperation, localcontext

ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")
PRIVATE_KEY_PATTERN = re.compile(r"^(0x)?[a-fA-F0-9]{64}$")
TX_HASH_PATTERN = re.compile(r"^0x[a-fA-F0-9]{64}$")


def is_valid_address(address: str) -> bool:
    return bool(ADDRESS_PATTERN.fullmatch(address))


def is_valid_private_key(private_key: str) -> bool:
    """Accepts 64 hex characters with or without the 0x prefix."""
    return bool(PRIVATE_KEY_PATTERN.fullmatch(private_key))


def is_valid_tx_hash(tx_hash: str) -> bool:
    return bool(TX_HASH_PATTERN.fullmatch(tx_hash))


def truncate_address(address: str, start: int = 6, end: int = 4) -> str:
    """0x1234567890abcdef... -> 0x1234...cdef"""
    if len(address) <= start + end:
        return address
    return f"{address[:start]}...{address[-end:]}"


def to_decimal(value: str | int | float | Decimal) -> Decimal:
    """
    Parse a human-readable amount.

    Raises
    ------
    ValueError
        If the value is not a finite decimal number
    """
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid decimal value: {value!r}")
    if not number.is_finite():
        raise ValueError(f"Invalid decimal value: {value!r}")
    return number


def format_units(value: int, decimals: int) -> str:
    """
    Convert a smallest-unit integer into a decimal string.

    Trailing zeros are dropped but at least one fractional digit is kept, so
    ``format_units(15 * 10**17, 18) == "1.5"`` and ``format_units(0, 18) == "0.0"``.

    Parameters
    ----------
    value : int
        Amount in smallest units
    decimals : int
        Token decimal precision

    Returns
    -------
    str
        Human-readable amount
    """
    if decimals < 0:
        raise ValueError("decimals must be non-negative")
    value = int(value)
    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10 ** decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{sign}{whole}.{fraction_str or '0'}"


def parse_units(amount: str | int | Decimal, decimals: int) -> int:
    """
    Convert a human-readable amount into smallest units.

    Parameters
    ----------
    amount : str | int | Decimal
        Human-readable amount, e.g. ``"12.5"``
    decimals : int
        Token decimal precision

    Returns
    -------
    int
        Amount in smallest units

    Raises
    ------
    ValueError
        If the amount is malformed or has more fractional digits than decimals
    """
    if decimals < 0:
        raise ValueError("decimals must be non-negative")
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = to_decimal(amount).scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {amount} has more than {decimals} decimal places")
    return int(scaled)


def format_ether(value: int) -> str:
    return format_units(value, 18)
