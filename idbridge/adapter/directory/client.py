"""Identity directory backed by Firebase Authentication."""

from collections.abc import Mapping, Sequence
from typing import Any, Optional

import logfire
import pydantic

from idbridge.adapter.error import IdentityToolkitError
from idbridge.adapter.identitytoolkit import IdentityToolkitClient, message_for
from idbridge.config import DirectorySettings
from idbridge.domain.error import DirectoryError, NotFoundError, ValidationError
from idbridge.domain.model import Account, IdentityRecord
from idbridge.domain.repository.identity_directory import (
    RESET_LINK_SENT,
    IdentityDirectory,
)
from idbridge.domain.service.identity_cache import IdentityCache
from idbridge.domain.value import IdentityAttributes, IdentityQuery
from idbridge.util.signing import create_verification_url

# Provider codes meaning "no such identity"
NOT_FOUND_CODES = frozenset({"USER_NOT_FOUND", "EMAIL_NOT_FOUND"})


def parse_attributes(attrs: Mapping[str, Any]) -> IdentityAttributes:
    try:
        return IdentityAttributes.model_validate(dict(attrs))
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid identity attributes: {e}") from e


def matches_term(record: IdentityRecord, term: str) -> bool:
    needle = term.lower()
    if record.display_name and needle in record.display_name.lower():
        return True
    if record.email and needle in record.email.lower():
        return True
    return bool(record.phone_number and term in record.phone_number)


class IdentityDirectoryClient(IdentityDirectory):
    """Identity directory over the Identity Toolkit REST API.

    Listing reads go through the read-through cache. Writes drop the
    per-identity cache entry of the affected uid once the provider has
    accepted them.
    """

    def __init__(
        self,
        toolkit: IdentityToolkitClient,
        identity_cache: IdentityCache,
        settings: DirectorySettings,
    ) -> None:
        """Initialize directory client.

        Args:
            toolkit: Identity Toolkit REST client
            identity_cache: Read-through cache
            settings: Directory settings (batch size, callback URLs)
        """
        self.toolkit = toolkit
        self.identity_cache = identity_cache
        self.settings = settings

    @staticmethod
    def _wrap(error: IdentityToolkitError, prefix: str | None = None) -> DirectoryError:
        message = f"{prefix}: {error.message}" if prefix else error.message
        return DirectoryError(message, code=error.code)

    async def _lookup(self, **criteria: Sequence[str]) -> Optional[IdentityRecord]:
        try:
            records = await self.toolkit.get_users(**criteria)
        except IdentityToolkitError as e:
            if e.code in NOT_FOUND_CODES:
                return None
            raise self._wrap(e) from e
        return records[0] if records else None

    async def find(self, uid: str) -> Optional[IdentityRecord]:
        if not uid:
            return None
        with logfire.span("identity_directory.find", uid=uid):
            return await self._lookup(uids=[uid])

    async def find_by_email(self, email: str) -> Optional[IdentityRecord]:
        if not email:
            return None
        with logfire.span("identity_directory.find_by_email", email=email):
            return await self._lookup(emails=[email])

    async def find_by_phone(self, phone: str) -> Optional[IdentityRecord]:
        if not phone:
            return None
        with logfire.span("identity_directory.find_by_phone", phone=phone):
            return await self._lookup(phone_numbers=[phone])

    async def find_many(
        self, uids: Sequence[str], use_cache: bool = True
    ) -> list[Optional[IdentityRecord]]:
        uids = list(uids)
        if not uids:
            return []

        async def fetch() -> list[Optional[IdentityRecord]]:
            try:
                records = await self.toolkit.get_users(uids=list(dict.fromkeys(uids)))
            except IdentityToolkitError as e:
                raise self._wrap(e) from e
            by_uid = {record.uid: record for record in records}
            return [by_uid.get(uid) for uid in uids]

        with logfire.span("identity_directory.find_many", count=len(uids)):
            return await self.identity_cache.remember(
                "find_many", [uids], fetch, use_cache
            )

    async def _apply_claims(self, uid: str, attributes: IdentityAttributes) -> None:
        claims = attributes.claims
        if claims:
            await self.toolkit.set_custom_claims(uid, claims)

    async def create(self, attrs: Mapping[str, Any]) -> IdentityRecord:
        attributes = parse_attributes(attrs)

        with logfire.span("identity_directory.create", email=attributes.email):
            try:
                uid = await self.toolkit.create_user(attributes.changes())
                await self._apply_claims(uid, attributes)
            except IdentityToolkitError as e:
                logfire.warn("Identity creation rejected", code=e.code)
                raise self._wrap(e) from e

            await self.identity_cache.forget_identity(uid)

            record = await self.find(uid)
            if record is None:
                raise DirectoryError(f"Created identity {uid} could not be read back")
            logfire.info("Identity created", uid=uid)
            return record

    async def update(
        self, uid: Optional[str], attrs: Mapping[str, Any]
    ) -> Optional[IdentityRecord]:
        if not uid:
            return None
        attributes = parse_attributes(attrs)

        with logfire.span("identity_directory.update", uid=uid):
            try:
                await self.toolkit.update_user(uid, attributes.changes())
                await self._apply_claims(uid, attributes)
            except IdentityToolkitError as e:
                if e.code in NOT_FOUND_CODES:
                    logfire.info("Identity to update not found", uid=uid)
                    return None
                raise self._wrap(e) from e

            await self.identity_cache.forget_identity(uid)
            return await self.find(uid)

    async def upsert(
        self, uid: Optional[str], attrs: Mapping[str, Any]
    ) -> IdentityRecord:
        record = await self.update(uid, attrs)
        if record is not None:
            return record
        return await self.create(attrs)

    async def delete(self, uids: str | Sequence[str]) -> bool:
        if isinstance(uids, str):
            return await self._delete_one(uids)

        uids = list(uids)
        if not uids:
            return False

        with logfire.span("identity_directory.delete_many", count=len(uids)):
            try:
                deleted = await self.toolkit.delete_users(uids)
            except IdentityToolkitError as e:
                raise self._wrap(e) from e
            for uid in uids:
                await self.identity_cache.forget_identity(uid)
            return deleted > 0

    async def _delete_one(self, uid: str) -> bool:
        if not uid:
            return False
        with logfire.span("identity_directory.delete", uid=uid):
            try:
                await self.toolkit.delete_user(uid)
            except IdentityToolkitError as e:
                if e.code not in NOT_FOUND_CODES:
                    raise self._wrap(e) from e
            await self.identity_cache.forget_identity(uid)
            return True

    async def delete_all(self) -> int:
        total = 0
        with logfire.span("identity_directory.delete_all"):
            while True:
                try:
                    batch = await self.toolkit.query_users(
                        limit=self.settings.batch_size
                    )
                    if not batch:
                        break
                    uids = [record.uid for record in batch]
                    deleted = await self.toolkit.delete_users(uids)
                except IdentityToolkitError as e:
                    raise self._wrap(e) from e

                for uid in uids:
                    await self.identity_cache.forget_identity(uid)
                total += deleted
                if deleted == 0:
                    # Provider keeps listing identities it refuses to delete
                    logfire.warn("Delete all stopped on undeletable batch", size=len(uids))
                    break

            logfire.info("Identities deleted", count=total)
        return total

    async def update_password(self, email: str, password: str) -> IdentityRecord:
        with logfire.span("identity_directory.update_password", email=email):
            record = await self.find_by_email(email)
            if record is None:
                raise ValidationError(
                    f"No identity found for e-mail {email}", field="email"
                ) from NotFoundError("Identity", email)

            try:
                await self.toolkit.update_user(record.uid, {"password": password})
            except IdentityToolkitError as e:
                raise self._wrap(e, "Failed to update password") from e

            await self.identity_cache.forget_identity(record.uid)
            updated = await self.find(record.uid)
            return updated or record

    async def _query_live(self, query: IdentityQuery) -> list[IdentityRecord]:
        expression = None
        if query.uid:
            expression = {"userId": query.uid}
        elif query.email:
            expression = {"email": query.email}
        elif query.phone_number:
            expression = {"phoneNumber": query.phone_number}

        try:
            return await self.toolkit.query_users(
                limit=query.limit,
                offset=query.offset,
                expression=expression,
                sort_by=query.sort_by,
                order=query.order,
            )
        except IdentityToolkitError as e:
            raise self._wrap(e) from e

    async def query(
        self, query: IdentityQuery | None = None, use_cache: bool = True
    ) -> list[IdentityRecord]:
        query = query or IdentityQuery()
        with logfire.span("identity_directory.query"):
            return await self.identity_cache.remember(
                "query", [query], lambda: self._query_live(query), use_cache
            )

    async def all(self) -> list[IdentityRecord]:
        records: list[IdentityRecord] = []
        page_size = self.settings.batch_size
        with logfire.span("identity_directory.all"):
            while True:
                page = await self._query_live(
                    IdentityQuery(limit=page_size, offset=len(records))
                )
                records.extend(page)
                if len(page) < page_size:
                    return records

    async def count(self) -> int:
        try:
            return await self.toolkit.count_users()
        except IdentityToolkitError as e:
            raise self._wrap(e) from e

    async def search(
        self,
        term: str | None = None,
        offset: int = 0,
        limit: int = 10,
        use_cache: bool = True,
    ) -> list[IdentityRecord]:
        term = term or ""
        page_query = IdentityQuery(offset=max(0, offset), limit=max(1, limit))

        async def fetch() -> list[IdentityRecord]:
            page = await self._query_live(page_query)
            if not term:
                return page
            return [record for record in page if matches_term(record, term)]

        with logfire.span("identity_directory.search", term=term):
            return await self.identity_cache.remember(
                "search", [term, page_query.offset, page_query.limit], fetch, use_cache
            )

    async def send_reset_link(self, email: str) -> str:
        with logfire.span("identity_directory.send_reset_link", email=email):
            try:
                await self.toolkit.send_oob_code(
                    "PASSWORD_RESET", email, continue_url=self.settings.login_url
                )
            except IdentityToolkitError as e:
                raise self._wrap(e) from e
            return RESET_LINK_SENT

    async def send_verification_email(
        self, account: Account, action: Mapping[str, Any] | None = None
    ) -> None:
        email = account.email
        if not account.uid or not email:
            raise ValidationError(
                "Account needs a uid and an e-mail address to be verified",
                field="email",
            )

        with logfire.span("identity_directory.send_verification_email", uid=account.uid):
            try:
                await self.toolkit.send_oob_code(
                    "VERIFY_EMAIL",
                    email,
                    continue_url=create_verification_url(account.uid, self.settings),
                    extra=dict(action or {}),
                )
            except IdentityToolkitError as e:
                raise self._wrap(e) from e

    def message(self, code: str, default: str | None = None) -> str:
        return message_for(code, default)

    async def check(self, email: str, password: str) -> bool:
        if not email or not password:
            return False
        try:
            await self.toolkit.sign_in_with_password(email, password)
        except IdentityToolkitError as e:
            logfire.info("Credentials rejected", email=email, code=e.code)
            return False
        return True

    async def attempt(
        self, credentials: Mapping[str, Any]
    ) -> Optional[IdentityRecord]:
        email = credentials.get("email")
        password = credentials.get("password")
        if not email and not password:
            raise ValidationError("Credentials need an email and a password")
        if not email or not password:
            return None

        with logfire.span("identity_directory.attempt", email=email):
            if not await self.check(email, password):
                return None
            return await self.find_by_email(email)

    async def enable(self, uid: str) -> Optional[IdentityRecord]:
        return await self.update(uid, {"disabled": False})

    async def disable(self, uid: str) -> Optional[IdentityRecord]:
        return await self.update(uid, {"disabled": True})
