"""Account domain service."""

import logfire

from idbridge.domain.error import NotFoundError
from idbridge.domain.model.account import Account
from idbridge.domain.repository.account import AccountRepository
from idbridge.domain.repository.identity_directory import IdentityDirectory

from .base import Service
from .identity_cache import IdentityCache


class AccountService(Service):
    """Domain service for local accounts backed by directory identities."""

    def __init__(
        self,
        account_repository: AccountRepository,
        directory: IdentityDirectory,
        identity_cache: IdentityCache,
    ) -> None:
        """Initialize account service.

        Args:
            account_repository: Local account repository (sync hook attached)
            directory: Identity directory
            identity_cache: Read-through cache
        """
        self.account_repository = account_repository
        self.directory = directory
        self.identity_cache = identity_cache

    async def get_by_key(self, uid: str) -> Account:
        """Get account by directory uid.

        Raises:
            NotFoundError: If no local account carries the uid
        """
        with logfire.span("account_service.get_by_key", uid=uid):
            account = await self.account_repository.find_by_key(uid)
            if not account:
                logfire.warn("Account not found", uid=uid)
                raise NotFoundError("Account", uid)
            return account

    async def find_by_email(self, email: str, use_cache: bool = True) -> Account | None:
        """Find the local account of the identity with an e-mail address.

        The directory resolves the e-mail to a uid, the local store resolves
        the uid to an account. The answer, including "no account", is cached
        for the configured TTL.

        Args:
            email: E-mail address
            use_cache: False forces a live lookup

        Returns:
            Account if found, None otherwise
        """

        async def lookup() -> Account | None:
            record = await self.directory.find_by_email(email)
            if record is None:
                return None
            return await self.account_repository.find_by_key(record.uid)

        with logfire.span("account_service.find_by_email", email=email):
            if not use_cache:
                account = await lookup()
            else:
                account = await self.identity_cache.remember_key(
                    self.identity_cache.email_key(email), lookup
                )
            if account:
                logfire.info("Account found", email=email, uid=account.uid)
            else:
                logfire.warn("Account not found", email=email)
            return account

    async def save(self, account: Account) -> Account:
        """Save account; the directory identity is upserted first.

        Raises:
            DirectoryError: If the directory rejects the change
        """
        with logfire.span("account_service.save", uid=account.uid):
            saved = await self.account_repository.save(account)
            if account.email:
                await self.identity_cache.forget_key(
                    self.identity_cache.email_key(account.email)
                )
            logfire.info("Account saved", account_id=str(saved.id), uid=saved.uid)
            return saved

    async def delete(self, account: Account) -> None:
        """Delete account and its directory identity."""
        with logfire.span("account_service.delete", uid=account.uid):
            email = account.email
            await self.account_repository.delete(account)
            if email:
                await self.identity_cache.forget_key(
                    self.identity_cache.email_key(email)
                )
            logfire.info("Account deleted", account_id=str(account.id))
