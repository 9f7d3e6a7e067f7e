"""In-memory identity directory that records its calls.

For tests and local development. Behaves like ``IdentityDirectoryClient``
without a network: same ordering, None-filling and filtering rules.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from idbridge.domain.error import NotFoundError, ValidationError
from idbridge.domain.model import Account, CallRecord, IdentityRecord
from idbridge.domain.repository.identity_directory import (
    RESET_LINK_SENT,
    IdentityDirectory,
)
from idbridge.domain.value import IdentityAttributes, IdentityKey, IdentityQuery

from .client import matches_term, parse_attributes


class FakeIdentityDirectory(IdentityDirectory):
    """Identity directory double over a dict.

    Every public operation appends a ``CallRecord`` before returning,
    whatever the outcome. Operations built on other operations record
    only themselves.
    """

    def __init__(self) -> None:
        self.records: dict[str, IdentityRecord] = {}
        self.passwords: dict[str, str] = {}
        self._calls: list[CallRecord] = []

    def _record(self, method: str, **arguments: Any) -> None:
        self._calls.append(
            CallRecord(method=method, arguments=arguments, ordinal=len(self._calls))
        )

    def calls(self) -> list[CallRecord]:
        """Logged calls, oldest first."""
        return list(self._calls)

    def assert_called(self, method: str) -> None:
        """Check that ``method`` was called at least once.

        Raises:
            RuntimeError: If it never was
        """
        if any(call.method == method for call in self._calls):
            return
        called = ", ".join(dict.fromkeys(call.method for call in self._calls))
        raise RuntimeError(
            f"Expected '{method}' to be called; calls were: {called or 'none'}"
        )

    def _find_by(self, field: str, value: str | None) -> Optional[IdentityRecord]:
        if not value:
            return None
        for record in self.records.values():
            if getattr(record, field) == value:
                return record
        return None

    def _create(self, attributes: IdentityAttributes) -> IdentityRecord:
        uid = IdentityKey(attributes.uid or uuid4().hex)
        fields = attributes.changes()
        password = fields.pop("password", None)
        fields.pop("uid", None)
        record = IdentityRecord(
            uid=uid,
            custom_claims=attributes.claims or {},
            created_at=datetime.now(timezone.utc),
            **{key: value for key, value in fields.items() if value is not None},
        )
        self.records[uid] = record
        if password:
            self.passwords[uid] = password
        return record

    def _update(
        self, uid: Optional[str], attributes: IdentityAttributes
    ) -> Optional[IdentityRecord]:
        if not uid or uid not in self.records:
            return None
        fields = attributes.changes()
        password = fields.pop("password", None)
        fields.pop("uid", None)
        if attributes.claims:
            fields["custom_claims"] = attributes.claims
        record = self.records[uid].model_copy(update=fields)
        self.records[uid] = record
        if password:
            self.passwords[uid] = password
        return record

    def _page(self, offset: int, limit: int | None) -> list[IdentityRecord]:
        records = list(self.records.values())
        end = None if limit is None else offset + limit
        return records[offset:end]

    async def find(self, uid: str) -> Optional[IdentityRecord]:
        self._record("find", uid=uid)
        return self.records.get(uid) if uid else None

    async def find_by_email(self, email: str) -> Optional[IdentityRecord]:
        self._record("find_by_email", email=email)
        return self._find_by("email", email)

    async def find_by_phone(self, phone: str) -> Optional[IdentityRecord]:
        self._record("find_by_phone", phone=phone)
        return self._find_by("phone_number", phone)

    async def find_many(
        self, uids: Sequence[str], use_cache: bool = True
    ) -> list[Optional[IdentityRecord]]:
        self._record("find_many", uids=list(uids), use_cache=use_cache)
        return [self.records.get(uid) for uid in uids]

    async def create(self, attrs: Mapping[str, Any]) -> IdentityRecord:
        self._record("create", attrs=dict(attrs))
        return self._create(parse_attributes(attrs))

    async def update(
        self, uid: Optional[str], attrs: Mapping[str, Any]
    ) -> Optional[IdentityRecord]:
        self._record("update", uid=uid, attrs=dict(attrs))
        return self._update(uid, parse_attributes(attrs))

    async def upsert(
        self, uid: Optional[str], attrs: Mapping[str, Any]
    ) -> IdentityRecord:
        self._record("upsert", uid=uid, attrs=dict(attrs))
        attributes = parse_attributes(attrs)
        return self._update(uid, attributes) or self._create(attributes)

    async def delete(self, uids: str | Sequence[str]) -> bool:
        if isinstance(uids, str):
            self._record("delete", uids=uids)
            self.records.pop(uids, None)
            self.passwords.pop(uids, None)
            return True

        uids = list(uids)
        self._record("delete", uids=uids)
        for uid in uids:
            self.records.pop(uid, None)
            self.passwords.pop(uid, None)
        return bool(uids)

    async def delete_all(self) -> int:
        self._record("delete_all")
        removed = len(self.records)
        self.records.clear()
        self.passwords.clear()
        return removed

    async def update_password(self, email: str, password: str) -> IdentityRecord:
        self._record("update_password", email=email)
        record = self._find_by("email", email)
        if record is None:
            raise ValidationError(
                f"No identity found for e-mail {email}", field="email"
            ) from NotFoundError("Identity", email)
        self.passwords[record.uid] = password
        return record

    async def query(
        self, query: IdentityQuery | None = None, use_cache: bool = True
    ) -> list[IdentityRecord]:
        self._record("query", query=query, use_cache=use_cache)
        query = query or IdentityQuery()
        if query.uid:
            matches = [self.records[query.uid]] if query.uid in self.records else []
        elif query.email:
            matches = [r for r in self.records.values() if r.email == query.email]
        elif query.phone_number:
            matches = [
                r for r in self.records.values() if r.phone_number == query.phone_number
            ]
        else:
            matches = list(self.records.values())

        if query.sort_by is not None:
            field = query.sort_by.value
            matches.sort(
                key=lambda r: (getattr(r, field) is None, getattr(r, field) or ""),
                reverse=query.order.value == "desc",
            )
        end = None if query.limit is None else query.offset + query.limit
        return matches[query.offset:end]

    async def all(self) -> list[IdentityRecord]:
        self._record("all")
        return list(self.records.values())

    async def count(self) -> int:
        self._record("count")
        return len(self.records)

    async def search(
        self,
        term: str | None = None,
        offset: int = 0,
        limit: int = 10,
        use_cache: bool = True,
    ) -> list[IdentityRecord]:
        self._record(
            "search", term=term, offset=offset, limit=limit, use_cache=use_cache
        )
        page = self._page(max(0, offset), max(1, limit))
        if not term:
            return page
        return [record for record in page if matches_term(record, term)]

    async def send_reset_link(self, email: str) -> str:
        self._record("send_reset_link", email=email)
        return RESET_LINK_SENT

    async def send_verification_email(
        self, account: Account, action: Mapping[str, Any] | None = None
    ) -> None:
        self._record(
            "send_verification_email", uid=account.uid, action=dict(action or {})
        )

    def message(self, code: str, default: str | None = None) -> str:
        self._record("message", code=code)
        return default or code

    async def check(self, email: str, password: str) -> bool:
        self._record("check", email=email)
        return bool(email) and bool(password)

    async def attempt(
        self, credentials: Mapping[str, Any]
    ) -> Optional[IdentityRecord]:
        email = credentials.get("email")
        self._record("attempt", email=email)
        if not email and not credentials.get("password"):
            raise ValidationError("Credentials need an email and a password")
        if not email or not credentials.get("password"):
            return None
        return self._find_by("email", email)

    async def enable(self, uid: str) -> Optional[IdentityRecord]:
        self._record("enable", uid=uid)
        return self._update(uid, IdentityAttributes(disabled=False))

    async def disable(self, uid: str) -> Optional[IdentityRecord]:
        self._record("disable", uid=uid)
        return self._update(uid, IdentityAttributes(disabled=True))
