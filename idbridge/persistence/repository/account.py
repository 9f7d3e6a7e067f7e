"""PostgreSQL implementation of Account repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from idbridge.domain.model import Account
from idbridge.domain.repository import AccountRepository
from idbridge.domain.value import AccountId, LifecycleEvent
from idbridge.persistence.mappers import account_to_dict, row_to_account
from idbridge.persistence.tables import accounts_table


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        super().__init__()
        self.session = session

    async def _load(self, stmt) -> Optional[Account]:
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        account = row_to_account(dict(row))
        await self.fire(LifecycleEvent.RETRIEVED, account)
        return account

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by local ID.

        Args:
            account_id: Account ID to look up

        Returns:
            Account if found, None otherwise
        """
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        return await self._load(stmt)

    async def find_by_key(self, uid: str) -> Optional[Account]:
        """Find an account by directory uid.

        Args:
            uid: Directory key to search for

        Returns:
            Account if found, None otherwise
        """
        stmt = select(accounts_table).where(accounts_table.c.uid == uid)
        return await self._load(stmt)

    async def save(self, account: Account) -> Account:
        """Save an account (create or update).

        The ``SAVING`` hooks run first; if one raises, nothing is written.

        Args:
            account: Account to save

        Returns:
            Saved account
        """
        await self.fire(LifecycleEvent.SAVING, account)

        account.set_attribute("updated_at", datetime.now())
        values = account_to_dict(account)

        if account.exists:
            stmt = (
                accounts_table.update()
                .where(accounts_table.c.id == account.id)
                .values(**values)
            )
        else:
            stmt = accounts_table.insert().values(**values)
        await self.session.execute(stmt)
        await self.session.flush()

        account.exists = True
        account.sync_original()
        return account

    async def delete(self, account: Account) -> None:
        """Delete an account.

        Args:
            account: Account to delete
        """
        await self.fire(LifecycleEvent.DELETING, account)

        stmt = accounts_table.delete().where(accounts_table.c.id == account.id)
        await self.session.execute(stmt)
        await self.session.flush()
        account.exists = False
