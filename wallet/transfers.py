import logging
from decimal import Decimal
from typing import Any, Mapping, Sequence

from eth_account import Account
from web3 import AsyncWeb3
from web3.logs import DISCARD

from core.exceptions import TransferFailedException
from wallet.entities import ZERO_BALANCE, TransferResult
from wallet.services import Web3Service
from wallet.utils import format_units, parse_units, truncate_address


def _to_hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


def extract_transaction_info(
    receipt: Mapping[str, Any],
    events: Sequence[Mapping[str, Any]] = (),
    decimals: int | None = None
) -> TransferResult:
    """
    Summarize a transfer receipt.

    Parameters
    ----------
    receipt : Mapping[str, Any]
        Transaction receipt
    events : Sequence[Mapping[str, Any]]
        Events decoded from the receipt logs
    decimals : int | None
        Token decimals used to format the amount, raw integer string if None

    Returns
    -------
    TransferResult
        Hash, status and addressing taken from the receipt; amount from the
        third argument of the first event or ``"0"``
    """
    amount = ZERO_BALANCE
    if events:
        args = list(events[0].get("args", {}).values())
        if len(args) >= 3 and args[2] is not None:
            amount = format_units(args[2], decimals) if decimals is not None else str(args[2])

    return TransferResult(
        transaction_hash=_to_hex(receipt["transactionHash"]),
        status=int(receipt["status"]),
        from_address=receipt["from"],
        to_address=receipt.get("to"),
        amount=amount,
    )


class TokenTransferExecutor:
    """
    Sends ERC-20 transfers and waits for their confirmation.

    Failures are raised to the caller and never retried.

    Parameters
    ----------
    web3_service : Web3Service
        Service providing clients and token contracts
    logger : logging.Logger
        Logger instance
    receipt_timeout : float
        Seconds to wait for the receipt
    """

    def __init__(self, web3_service: Web3Service, logger: logging.Logger, receipt_timeout: float = 120):
        self.web3_service = web3_service
        self.logger = logger
        self.receipt_timeout = receipt_timeout

    async def transfer(
        self,
        private_key: str,
        rpc_url: str,
        contract_address: str,
        to_address: str,
        amount: str | Decimal
    ) -> TransferResult:
        """
        Transfer tokens from the account owning private_key.

        Parameters
        ----------
        private_key : str
            Sender private key
        rpc_url : str
            JSON-RPC endpoint
        contract_address : str
            Token contract address
        to_address : str
            Recipient address
        amount : str | Decimal
            Human-readable amount, scaled by the token decimals

        Returns
        -------
        TransferResult
            Summary of the confirmed transaction

        Raises
        ------
        TransferFailedException
            If the transaction was mined but reverted
        """
        account = Account.from_key(private_key)
        web3 = self.web3_service.get_client(rpc_url)
        contract = self.web3_service.get_token_contract(rpc_url, contract_address)

        decimals = await contract.functions.decimals().call()
        value = parse_units(amount, decimals)
        recipient = AsyncWeb3.to_checksum_address(to_address)

        nonce = await web3.eth.get_transaction_count(account.address)
        tx = await contract.functions.transfer(recipient, value).build_transaction({
            "from": account.address,
            "nonce": nonce,
        })
        signed_tx = account.sign_transaction(tx)
        tx_hash = await web3.eth.send_raw_transaction(signed_tx.raw_transaction)
        self.logger.info(
            f"{truncate_address(account.address)} | Sent {amount} of {contract_address} "
            f"to {truncate_address(recipient)}: {_to_hex(tx_hash)}"
        )

        receipt = await web3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.receipt_timeout)
        if receipt["status"] == 0:
            self.logger.error(f"Transfer {_to_hex(tx_hash)} reverted")
            raise TransferFailedException(f"error.transfer.reverted: {_to_hex(tx_hash)}")

        events = contract.events.Transfer().process_receipt(receipt, errors=DISCARD)
        return extract_transaction_info(receipt, events, decimals)
