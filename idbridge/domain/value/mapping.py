"""Attribute mapping between local account fields and directory fields."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from idbridge.domain.value.common import ValueObject


class AttributeMapping(ValueObject):
    """Fixed two-way dictionary, local field name -> directory field name.

    Used local -> remote for writes (``to_remote``) and remote -> local for
    attribute reads (``resolve``).
    """

    table: dict[str, str]

    @property
    def remote_owned(self) -> frozenset[str]:
        """Local field names owned by the directory, never persisted locally."""
        return frozenset(self.table)

    def remote_name(self, local: str) -> str | None:
        """Directory field name for a local field, None when unmapped."""
        return self.table.get(local)

    def to_remote(self, local_attrs: Mapping[str, Any]) -> dict[str, Any]:
        """Keep mapped keys only and rename them to their directory names.

        Values pass through unchanged; unmapped keys are dropped.
        """
        return {
            self.table[key]: value
            for key, value in local_attrs.items()
            if key in self.table
        }

    def resolve(
        self,
        field: str,
        record: BaseModel | None,
        local: Mapping[str, Any],
        default: Any = None,
    ) -> Any:
        """Read an attribute, directory snapshot first, then local storage.

        Args:
            field: Local field name
            record: Attached directory record (may be None)
            local: Locally stored attributes
            default: Returned when neither source has a value

        Returns:
            The directory value when present and not None, else the local
            value, else ``default``
        """
        remote = self.table.get(field)
        if record is not None and remote is not None:
            value = getattr(record, remote, None)
            if value is not None:
                return value
        value = local.get(field)
        return default if value is None else value


IDENTITY_MAPPING = AttributeMapping(
    table={
        "name": "display_name",
        "email": "email",
        "phone": "phone_number",
        "avatar": "photo_url",
        "options": "custom_claims",
        "disabled": "disabled",
        "password": "password",
        "email_verified": "email_verified",
    }
)
