"""Account repository interface."""

from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Optional

from idbridge.domain.model.account import Account
from idbridge.domain.value import AccountId, LifecycleEvent

LifecycleHook = Callable[[Account], Awaitable[None]]


class AccountRepository(ABC):
    """Repository for local accounts.

    Implementations fire lifecycle hooks: ``RETRIEVED`` after an account is
    loaded, ``SAVING`` before it is written, ``DELETING`` before it is
    removed. An exception raised by a ``SAVING`` or ``DELETING`` hook
    aborts the local write.
    """

    def __init__(self) -> None:
        self._hooks: dict[LifecycleEvent, list[LifecycleHook]] = defaultdict(list)

    def register_hook(self, event: LifecycleEvent, hook: LifecycleHook) -> None:
        """Register a callback for a lifecycle event.

        Args:
            event: Event to listen to
            hook: Coroutine function receiving the account
        """
        self._hooks[event].append(hook)

    async def fire(self, event: LifecycleEvent, account: Account) -> None:
        """Run the hooks registered for an event, in registration order."""
        for hook in self._hooks[event]:
            await hook(account)

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by local ID.

        Args:
            account_id: The account's local identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_key(self, uid: str) -> Optional[Account]:
        """Find an account by its directory key.

        Args:
            uid: Directory uid

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """Save an account (create or update).

        Args:
            account: The account to save

        Returns:
            The saved account
        """
        pass

    @abstractmethod
    async def delete(self, account: Account) -> None:
        """Delete an account.

        Args:
            account: The account to delete
        """
        pass
