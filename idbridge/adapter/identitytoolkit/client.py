"""Identity Toolkit REST client.

Admin access to Firebase Authentication (Google Identity Toolkit v1).
Works against the Auth emulator when ``base_url`` points at it.
"""

import json
from collections.abc import Sequence
from typing import Any

import httpx
import logfire

from idbridge.adapter.error import IdentityToolkitError
from idbridge.adapter.identitytoolkit.mappers import (
    SORT_FIELDS,
    create_payload,
    update_payload,
    user_info_to_record,
)
from idbridge.config import DirectorySettings
from idbridge.domain.model import IdentityRecord
from idbridge.domain.value import QuerySortField, SortOrder


class IdentityToolkitClient:
    """Thin async client over the Identity Toolkit REST API.

    Every method issues exactly one request. Any non-2xx response raises
    ``IdentityToolkitError`` with the provider error code.
    """

    def __init__(self, http: httpx.AsyncClient, settings: DirectorySettings) -> None:
        """Initialize Identity Toolkit client.

        Args:
            http: Shared httpx client
            settings: Directory settings (project, credentials, base URL)
        """
        self.http = http
        self.settings = settings
        self.api_url = f"{settings.base_url.rstrip('/')}/v1"
        self.project_url = f"{self.api_url}/projects/{settings.project_id}"

    def _headers(self) -> dict[str, str]:
        if self.settings.access_token:
            return {"Authorization": f"Bearer {self.settings.access_token}"}
        return {}

    def _params(self) -> dict[str, str]:
        if self.settings.api_key:
            return {"key": self.settings.api_key}
        return {}

    async def _post(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON body and return the decoded response.

        Raises:
            IdentityToolkitError: On transport failure or error response
        """
        try:
            response = await self.http.post(
                url,
                json=payload,
                headers=self._headers(),
                params=self._params(),
                timeout=self.settings.timeout,
            )
        except httpx.HTTPError as e:
            logfire.error("Identity Toolkit unreachable", url=url, error=str(e))
            raise IdentityToolkitError("NETWORK_ERROR", str(e)) from e

        if response.is_error:
            raise self._error_from(response)

        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _error_from(response: httpx.Response) -> IdentityToolkitError:
        """Parse ``{"error": {"message": "CODE : detail"}}`` error bodies."""
        try:
            error = response.json().get("error", {})
            message = str(error.get("message") or f"HTTP_{response.status_code}")
        except ValueError:
            message = f"HTTP_{response.status_code}"
        code = message.split(" : ", 1)[0].strip()
        return IdentityToolkitError(code, message, response.status_code)

    async def get_users(
        self,
        uids: Sequence[str] = (),
        emails: Sequence[str] = (),
        phone_numbers: Sequence[str] = (),
    ) -> list[IdentityRecord]:
        """Look up identities by uid, e-mail or phone number.

        Returns:
            Found identities, in provider order; missing ones are absent
        """
        payload: dict[str, Any] = {}
        if uids:
            payload["localId"] = list(uids)
        if emails:
            payload["email"] = list(emails)
        if phone_numbers:
            payload["phoneNumber"] = list(phone_numbers)

        data = await self._post(f"{self.project_url}/accounts:lookup", payload)
        return [user_info_to_record(info) for info in data.get("users", [])]

    async def create_user(self, fields: dict[str, Any]) -> str:
        """Create an identity.

        Args:
            fields: Directory-named fields (``uid`` requests a specific uid)

        Returns:
            uid of the new identity
        """
        data = await self._post(f"{self.project_url}/accounts", create_payload(fields))
        return data["localId"]

    async def update_user(self, uid: str, fields: dict[str, Any]) -> str:
        """Update an identity.

        Raises:
            IdentityToolkitError: ``USER_NOT_FOUND`` when uid is unknown
        """
        data = await self._post(
            f"{self.project_url}/accounts:update", update_payload(uid, fields)
        )
        return data.get("localId", uid)

    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        """Replace the custom claims of an identity."""
        await self._post(
            f"{self.project_url}/accounts:update",
            {"localId": uid, "customAttributes": json.dumps(claims)},
        )

    async def delete_user(self, uid: str) -> None:
        """Delete one identity.

        Raises:
            IdentityToolkitError: ``USER_NOT_FOUND`` when uid is unknown
        """
        await self._post(f"{self.project_url}/accounts:delete", {"localId": uid})

    async def delete_users(self, uids: Sequence[str]) -> int:
        """Delete a batch of identities in one request.

        Unknown uids are not errors for the provider.

        Returns:
            Number of successful deletions
        """
        data = await self._post(
            f"{self.project_url}/accounts:batchDelete",
            {"localIds": list(uids), "force": True},
        )
        errors = data.get("errors", [])
        if errors:
            logfire.warn(
                "Batch delete partially failed",
                failed=len(errors),
                requested=len(uids),
            )
        return len(uids) - len(errors)

    async def query_users(
        self,
        limit: int | None = None,
        offset: int = 0,
        expression: dict[str, str] | None = None,
        sort_by: QuerySortField | None = None,
        order: SortOrder = SortOrder.ASC,
    ) -> list[IdentityRecord]:
        """List identities.

        Args:
            limit: Page size (provider default when None)
            offset: Records to skip
            expression: Exact-match filter, e.g. ``{"email": "a@ex.com"}``
            sort_by: Sort field
            order: Sort direction

        Returns:
            One page of identities
        """
        payload: dict[str, Any] = {"returnUserInfo": True, "offset": str(offset)}
        if limit is not None:
            payload["limit"] = str(limit)
        if expression:
            payload["expression"] = [expression]
        if sort_by is not None:
            payload["sortBy"] = SORT_FIELDS[sort_by]
            payload["order"] = order.value.upper()

        data = await self._post(f"{self.project_url}/accounts:query", payload)
        return [user_info_to_record(info) for info in data.get("userInfo", [])]

    async def count_users(self) -> int:
        """Count identities without fetching them."""
        data = await self._post(
            f"{self.project_url}/accounts:query", {"returnUserInfo": False}
        )
        return int(data.get("recordsCount", 0))

    async def sign_in_with_password(self, email: str, password: str) -> str:
        """Verify e-mail and password credentials.

        Returns:
            uid of the signed-in identity

        Raises:
            IdentityToolkitError: ``INVALID_LOGIN_CREDENTIALS``,
                ``USER_DISABLED``, ...
        """
        data = await self._post(
            f"{self.api_url}/accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return data["localId"]

    async def send_oob_code(
        self,
        request_type: str,
        email: str,
        continue_url: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Ask the provider to e-mail an out-of-band code.

        Args:
            request_type: ``PASSWORD_RESET`` or ``VERIFY_EMAIL``
            email: Recipient
            continue_url: Where the e-mailed link returns to
            extra: Additional action code settings
        """
        payload: dict[str, Any] = {"requestType": request_type, "email": email}
        if continue_url:
            payload["continueUrl"] = continue_url
        if extra:
            payload.update(extra)
        await self._post(f"{self.project_url}/accounts:sendOobCode", payload)
