import logging

from eth_account import Account

from core.redis.providers import KeyValueStore
from wallet.entities import AccountCreation, AccountRecord
from wallet.utils import truncate_address

ADMIN_PREFIX = ("admin",)
ACCOUNT_PREFIX = ("acct",)
ADMIN_SLOT_KEY = ("acct", "eth", "admin")


def generate_keypair() -> tuple[str, str]:
    """
    Create a random account.

    Returns
    -------
    tuple[str, str]
        Checksummed address and 0x-prefixed private key
    """
    account = Account.create()
    return account.address, "0x" + bytes(account.key).hex()


class AccountRegistry:
    """
    Registry of the admin account and the user accounts.

    Storage layout::

        (admin, <address>)     -> private key   admin with persisted key
        (acct, eth, admin)     -> address       admin without persisted key
        (acct, <address>)      -> private key   user with persisted key
        (acct, eth, <address>) -> {}            user without persisted key

    Parameters
    ----------
    kv_store : KeyValueStore
        Key-value store holding the records
    logger : logging.Logger
        Logger instance
    """

    def __init__(self, kv_store: KeyValueStore, logger: logging.Logger):
        self.kv = kv_store
        self.logger = logger

    async def get_admin(self) -> AccountRecord | None:
        """
        Return the admin account.

        Returns
        -------
        AccountRecord | None
            Admin with its private key when stored, None if there is no admin
        """
        for key, private_key in await self.kv.list_by_prefix(ADMIN_PREFIX):
            if len(key) >= 2:
                return AccountRecord(address=key[1], private_key=private_key or None, role="admin")

        address = await self.kv.get(ADMIN_SLOT_KEY)
        if address:
            return AccountRecord(address=address, role="admin")
        return None

    async def generate_admin(self) -> AccountCreation:
        """
        Create the admin account and persist its private key.

        An existing admin is never replaced.

        Returns
        -------
        AccountCreation
            New admin, or ``created=False`` when an admin is already set
        """
        existing = await self.get_admin()
        if existing is not None:
            self.logger.info(f"Admin already set: {truncate_address(existing.address)}")
            return AccountCreation(created=False, message="admin already set")

        address, private_key = generate_keypair()
        await self.kv.set((*ADMIN_PREFIX, address), private_key)
        self.logger.info(f"Admin created: {truncate_address(address)}")
        return AccountCreation(
            created=True,
            message="admin created",
            account=AccountRecord(address=address, private_key=private_key, role="admin"),
        )

    async def generate_account(self, is_admin: bool) -> AccountCreation:
        """
        Create an account without persisting its private key.

        The caller receives the private key and is responsible for keeping it.

        Parameters
        ----------
        is_admin : bool
            Register the address as admin instead of as a user

        Returns
        -------
        AccountCreation
            New account with its private key, or ``created=False`` when
            ``is_admin`` is set and an admin already exists
        """
        if is_admin and await self.get_admin() is not None:
            return AccountCreation(created=False, message="admin already set")

        address, private_key = generate_keypair()
        if is_admin:
            await self.kv.set(ADMIN_SLOT_KEY, address)
        else:
            await self.kv.set((*ACCOUNT_PREFIX, "eth", address), {})

        role = "admin" if is_admin else "user"
        self.logger.info(f"Generated {role} account {truncate_address(address)} (key not stored)")
        return AccountCreation(
            created=True,
            message=f"{role} account created",
            account=AccountRecord(address=address, private_key=private_key, role=role),
        )

    async def generate_account_with_key(self) -> AccountCreation:
        """
        Create a user account and persist its private key.

        Returns
        -------
        AccountCreation
            New account with its private key
        """
        address, private_key = generate_keypair()
        await self.kv.set((*ACCOUNT_PREFIX, address), private_key)
        self.logger.info(f"Generated user account {truncate_address(address)}")
        return AccountCreation(
            created=True,
            message="user account created",
            account=AccountRecord(address=address, private_key=private_key, role="user"),
        )

    async def list_accounts(self) -> list[str]:
        addresses = []
        for key, _ in await self.kv.list_by_prefix(ACCOUNT_PREFIX):
            if len(key) == 2:
                address = key[1]
            elif len(key) == 3 and key[1] == "eth" and key[2] != "admin":
                address = key[2]
            else:
                continue
            if address not in addresses:
                addresses.append(address)
        return addresses

    async def get_account_private_key(self, address: str) -> str | None:
        private_key = await self.kv.get((*ACCOUNT_PREFIX, address))
        return private_key or None

    async def get_signing_key(self, address: str) -> str | None:
        """
        Find the stored private key able to sign for an address.

        Parameters
        ----------
        address : str
            Admin or user address

        Returns
        -------
        str | None
            Private key, None when the registry does not hold one
        """
        admin = await self.get_admin()
        if admin is not None and admin.private_key and admin.address.lower() == address.lower():
            return admin.private_key
        return await self.get_account_private_key(address)
