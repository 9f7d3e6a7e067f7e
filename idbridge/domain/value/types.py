"""Domain value objects for identity synchronization.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, Field, model_validator

from idbridge.domain.value.common import ValueObject


class LifecycleEvent(str, Enum):
    """Local account lifecycle events a hook can be registered for."""

    RETRIEVED = "retrieved"
    SAVING = "saving"
    DELETING = "deleting"


class QuerySortField(str, Enum):
    """Fields the directory can sort a query by."""

    UID = "uid"
    EMAIL = "email"
    DISPLAY_NAME = "display_name"
    CREATED_AT = "created_at"
    LAST_LOGIN_AT = "last_login_at"


class SortOrder(str, Enum):
    """Query sort direction."""

    ASC = "asc"
    DESC = "desc"


class IdentityQuery(ValueObject):
    """Directory listing query.

    At most one of ``uid``, ``email`` or ``phone_number`` may be set; the
    directory matches it exactly. Without a limit the directory's own page
    size applies.
    """

    limit: int | None = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)
    sort_by: QuerySortField | None = None
    order: SortOrder = SortOrder.ASC
    uid: str | None = None
    email: str | None = None
    phone_number: str | None = None

    @model_validator(mode="after")
    def validate_single_filter(self) -> "IdentityQuery":
        """Reject queries filtering on more than one field."""
        filters = [f for f in (self.uid, self.email, self.phone_number) if f]
        if len(filters) > 1:
            raise ValueError("Only one of uid, email or phone_number may be set")
        return self


class IdentityAttributes(ValueObject):
    """Write payload for creating or updating a directory identity.

    Keys use the directory schema. ``options`` is accepted as an alias of
    ``custom_claims``. Unknown keys are ignored, and only the keys that were
    actually given are sent (see ``changes``).
    """

    uid: str | None = None
    email: str | None = None
    display_name: str | None = None
    phone_number: str | None = None
    photo_url: str | None = None
    password: str | None = None
    disabled: bool | None = None
    email_verified: bool | None = None
    custom_claims: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("custom_claims", "options")
    )

    def changes(self) -> dict[str, Any]:
        """Return the explicitly given fields, claims excluded."""
        return self.model_dump(exclude_unset=True, exclude={"custom_claims"})

    @property
    def claims(self) -> dict[str, Any] | None:
        """Custom claims to apply in the second write step, if any."""
        return self.custom_claims or None
