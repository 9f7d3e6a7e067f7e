"""Synchronization between local accounts and directory identities."""

import logfire

from idbridge.domain.model.account import Account
from idbridge.domain.repository.account import AccountRepository
from idbridge.domain.repository.identity_directory import IdentityDirectory
from idbridge.domain.value import IDENTITY_MAPPING, AttributeMapping, LifecycleEvent

from .base import Service
from .identity_cache import IdentityCache


class IdentitySyncHook(Service):
    """Keeps a local account and its directory identity consistent.

    Registered on an ``AccountRepository``:

    - retrieved: attach the cached directory identity
    - saving: upsert changed directory-owned attributes, adopt the
      canonical uid, strip directory-owned attributes from the local write
    - deleting: delete the directory identity first

    Directory failures propagate, so the local write is aborted.
    """

    def __init__(
        self,
        directory: IdentityDirectory,
        identity_cache: IdentityCache,
        mapping: AttributeMapping = IDENTITY_MAPPING,
    ) -> None:
        """Initialize synchronization hook.

        Args:
            directory: Identity directory
            identity_cache: Read-through cache holding per-identity entries
            mapping: Local to directory attribute mapping
        """
        self.directory = directory
        self.identity_cache = identity_cache
        self.mapping = mapping

    def attach(self, repository: AccountRepository) -> None:
        """Register this hook's callbacks on a repository."""
        repository.register_hook(LifecycleEvent.RETRIEVED, self.retrieved)
        repository.register_hook(LifecycleEvent.SAVING, self.saving)
        repository.register_hook(LifecycleEvent.DELETING, self.deleting)

    async def retrieved(self, account: Account) -> None:
        """Attach the directory identity of a freshly loaded account.

        No identity in the directory is fine; the account keeps working
        with its local attributes only.
        """
        uid = account.get_attribute(account.key_name)
        if not isinstance(uid, str) or account.identity is not None:
            return

        with logfire.span("identity_sync.retrieved", uid=uid):
            account.identity = await self.identity_cache.remember_identity(
                uid, lambda: self.directory.find(uid)
            )
            if account.identity is None:
                logfire.warn("No directory identity for account", uid=uid)

    async def saving(self, account: Account) -> None:
        """Push changes to the directory before the local write.

        Raises:
            DirectoryError: If the directory rejects the change
        """
        attributes = account.get_dirty_attributes()
        current = account.get_attribute(account.key_name)
        current_uid = current if isinstance(current, str) and current else None

        with logfire.span("identity_sync.saving", uid=current_uid):
            record = await self.directory.upsert(
                current_uid, self.mapping.to_remote(attributes)
            )
            account.identity = record

            local = {
                key: value
                for key, value in account.attributes.items()
                if key not in self.mapping.remote_owned
            }
            if record.uid != current_uid:
                local[account.key_name] = record.uid
                logfire.info(
                    "Account adopted directory uid",
                    previous_uid=current_uid,
                    uid=record.uid,
                )
            account.set_raw_attributes(local)

            # Only after the remote write has committed
            await self.identity_cache.forget_identity(current_uid)
            if record.uid != current_uid:
                await self.identity_cache.forget_identity(record.uid)

    async def deleting(self, account: Account) -> None:
        """Delete the directory identity before the local removal."""
        uid = account.uid
        if uid is None:
            return

        with logfire.span("identity_sync.deleting", uid=uid):
            await self.directory.delete(uid)
            await self.identity_cache.forget_identity(uid)
