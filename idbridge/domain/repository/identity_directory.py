"""Identity directory interface."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from idbridge.domain.model.account import Account
from idbridge.domain.model.identity_record import IdentityRecord
from idbridge.domain.value import IdentityQuery

RESET_LINK_SENT = "RESET_LINK_SENT"


class IdentityDirectory(ABC):
    """Remote identity directory, the source of truth for identities.

    Lookups that find nothing return None (or False for deletes); they do
    not raise. Provider failures on writes raise ``DirectoryError``.
    """

    @abstractmethod
    async def find(self, uid: str) -> Optional[IdentityRecord]:
        """Find an identity by uid.

        Args:
            uid: Directory key

        Returns:
            The identity if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[IdentityRecord]:
        """Find an identity by e-mail address."""
        pass

    @abstractmethod
    async def find_by_phone(self, phone: str) -> Optional[IdentityRecord]:
        """Find an identity by phone number."""
        pass

    @abstractmethod
    async def find_many(
        self, uids: Sequence[str], use_cache: bool = True
    ) -> list[Optional[IdentityRecord]]:
        """Find several identities.

        Args:
            uids: Directory keys, in the order results are wanted
            use_cache: Whether a cached result may be returned

        Returns:
            One entry per uid, in input order, None where missing
        """
        pass

    @abstractmethod
    async def create(self, attrs: Mapping[str, Any]) -> IdentityRecord:
        """Create an identity.

        ``custom_claims`` (or ``options``) are applied in a second call
        after creation.

        Raises:
            DirectoryError: If the directory rejects the attributes
        """
        pass

    @abstractmethod
    async def update(
        self, uid: Optional[str], attrs: Mapping[str, Any]
    ) -> Optional[IdentityRecord]:
        """Update an identity.

        Returns:
            The updated identity, None when uid does not resolve
        """
        pass

    @abstractmethod
    async def upsert(
        self, uid: Optional[str], attrs: Mapping[str, Any]
    ) -> IdentityRecord:
        """Update the identity when uid resolves, otherwise create one.

        An unknown or stale uid silently becomes a create. Callers that need
        update-or-fail must call ``update`` and check for None.
        """
        pass

    @abstractmethod
    async def delete(self, uids: str | Sequence[str]) -> bool:
        """Delete one identity or a batch.

        Returns:
            Single uid: whether it is gone (already absent counts).
            Batch: whether at least one deletion succeeded, not all.
        """
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every identity, batch by batch.

        Returns:
            Number of identities removed
        """
        pass

    @abstractmethod
    async def update_password(self, email: str, password: str) -> IdentityRecord:
        """Change the password of the identity with the given e-mail.

        Raises:
            ValidationError: If no identity has that e-mail
            DirectoryError: On any other provider failure
        """
        pass

    @abstractmethod
    async def query(
        self, query: IdentityQuery | None = None, use_cache: bool = True
    ) -> list[IdentityRecord]:
        """List identities matching a query."""
        pass

    @abstractmethod
    async def all(self) -> list[IdentityRecord]:
        """List every identity."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count identities."""
        pass

    @abstractmethod
    async def search(
        self,
        term: str | None = None,
        offset: int = 0,
        limit: int = 10,
        use_cache: bool = True,
    ) -> list[IdentityRecord]:
        """Search one page of identities.

        The page is fetched with offset floored at 0 and limit floored at 1,
        then filtered: display name and e-mail match case-insensitively,
        phone number as a plain substring. An empty term matches everything.
        """
        pass

    @abstractmethod
    async def send_reset_link(self, email: str) -> str:
        """Request a password reset e-mail.

        Returns:
            ``RESET_LINK_SENT``
        """
        pass

    @abstractmethod
    async def send_verification_email(
        self, account: Account, action: Mapping[str, Any] | None = None
    ) -> None:
        """Request an e-mail verification message for an account."""
        pass

    @abstractmethod
    def message(self, code: str, default: str | None = None) -> str:
        """Human-readable text for a provider error code.

        Falls back to ``default``, then to the code itself.
        """
        pass

    @abstractmethod
    async def check(self, email: str, password: str) -> bool:
        """Whether the directory accepts the credentials. Never raises."""
        pass

    @abstractmethod
    async def attempt(
        self, credentials: Mapping[str, Any]
    ) -> Optional[IdentityRecord]:
        """Sign in with ``email`` and ``password`` credentials.

        Returns:
            The identity on success, None on rejection or when one of the
            two credentials is missing

        Raises:
            ValidationError: If neither email nor password is given
        """
        pass

    @abstractmethod
    async def enable(self, uid: str) -> Optional[IdentityRecord]:
        """Enable an identity. Returns None when uid does not resolve."""
        pass

    @abstractmethod
    async def disable(self, uid: str) -> Optional[IdentityRecord]:
        """Disable an identity. Returns None when uid does not resolve."""
        pass
