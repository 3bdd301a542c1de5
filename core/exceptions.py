from abc import ABC


class BaseCustomException(Exception, ABC):
    """
    Base class for all custom exceptions.
    """

    def __init__(self, message: str | None = None):
        self.message = message or self.get_default_message()
        super().__init__(self.message)

    def get_default_message(self) -> str:
        """
        Return default error message.

        Returns
        -------
        str
            Default error message
        """
        return "error.unknown"

    def get_status_code(self) -> int:
        """
        Return HTTP status code for exception.

        Returns
        -------
        int
            HTTP status code
        """
        return 500


class BadRequestException(BaseCustomException):
    """Bad request exception (400)."""

    def get_status_code(self) -> int:
        return 400


class NotFoundException(BaseCustomException):
    """Not found exception (404)."""

    def get_status_code(self) -> int:
        return 404


class InvalidAddressException(BadRequestException):
    """Invalid address exception."""

    def get_default_message(self) -> str:
        return "error.address.invalid"


class InvalidPrivateKeyException(BadRequestException):
    """Invalid private key exception."""

    def get_default_message(self) -> str:
        return "error.private_key.invalid"


class InvalidNetworkConfigException(BadRequestException):
    """Malformed network configuration."""

    def get_default_message(self) -> str:
        return "error.network.invalid"


class AccountNotFoundException(NotFoundException):
    """No signing key is registered for the account."""

    def get_default_message(self) -> str:
        return "error.account.not_found"


class TokenInfoUnavailableException(NotFoundException):
    """Token metadata could not be read."""

    def get_default_message(self) -> str:
        return "error.token.info_unavailable"


class RPCException(BaseCustomException):
    """RPC error exception."""

    def get_default_message(self) -> str:
        return "error.rpc.failed"


class TransferFailedException(RPCException):
    """Transfer transaction was mined but reverted."""

    def get_default_message(self) -> str:
        return "error.transfer.reverted"
