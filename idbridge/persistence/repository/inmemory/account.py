"""In-memory account repository for testing."""

from datetime import datetime
from typing import Any, Optional

from idbridge.domain.model.account import Account
from idbridge.domain.repository.account import AccountRepository
from idbridge.domain.value import AccountId, LifecycleEvent


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing.

    Stores locally owned columns only, like the database does, and hands
    out a fresh Account per load.
    """

    def __init__(self) -> None:
        super().__init__()
        self._rows: dict[AccountId, dict[str, Any]] = {}

    async def _load(self, row: Optional[dict[str, Any]]) -> Optional[Account]:
        if row is None:
            return None
        account = Account(attributes=dict(row), exists=True)
        account.sync_original()
        await self.fire(LifecycleEvent.RETRIEVED, account)
        return account

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by local ID."""
        return await self._load(self._rows.get(account_id))

    async def find_by_key(self, uid: str) -> Optional[Account]:
        """Find an account by directory uid."""
        for row in self._rows.values():
            if row.get("uid") == uid:
                return await self._load(row)
        return None

    async def save(self, account: Account) -> Account:
        """Save or update an account."""
        await self.fire(LifecycleEvent.SAVING, account)
        account.set_attribute("updated_at", datetime.now())
        self._rows[account.id] = account.local_attributes()
        account.exists = True
        account.sync_original()
        return account

    async def delete(self, account: Account) -> None:
        """Delete an account."""
        await self.fire(LifecycleEvent.DELETING, account)
        self._rows.pop(account.id, None)
        account.exists = False
