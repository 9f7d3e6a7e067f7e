"""Local account entity.

Holds the foreign key (``uid``) into the directory plus the fields owned
by the local store. Directory-owned attributes can be set on an account
before saving; the synchronization hook pushes them to the directory and
strips them before the local write.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar
from uuid import uuid4

from idbridge.domain.model.identity_record import IdentityRecord
from idbridge.domain.value import IDENTITY_MAPPING, AccountId


@dataclass
class Account:
    """Local account with change tracking.

    ``attributes`` is the current attribute bag, ``original`` the values as
    last loaded from or written to the local store. ``identity`` is the
    attached directory snapshot, if one has been loaded.
    """

    key_name: ClassVar[str] = "uid"
    local_fields: ClassVar[tuple[str, ...]] = (
        "id",
        "uid",
        "role",
        "created_at",
        "updated_at",
    )

    attributes: dict[str, Any] = field(default_factory=dict)
    original: dict[str, Any] = field(default_factory=dict)
    identity: IdentityRecord | None = None
    exists: bool = False

    @classmethod
    def new(cls, **attributes: Any) -> "Account":
        """Create an unsaved account with a fresh local id."""
        now = datetime.now()
        defaults = {
            "id": AccountId(uuid4()),
            "role": "member",
            "created_at": now,
            "updated_at": now,
        }
        return cls(attributes={**defaults, **attributes})

    @property
    def id(self) -> AccountId | None:
        return self.attributes.get("id")

    @property
    def uid(self) -> str | None:
        """Directory key, None until the account has been synchronized."""
        value = self.attributes.get(self.key_name)
        return value if isinstance(value, str) and value else None

    @property
    def role(self) -> str | None:
        return self.attributes.get("role")

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def set_attribute(self, name: str, value: Any) -> None:
        self.attributes[name] = value

    def fill(self, **attributes: Any) -> "Account":
        """Set several attributes at once."""
        self.attributes.update(attributes)
        return self

    def get_dirty_attributes(self) -> dict[str, Any]:
        """Attributes changed since the last load or save."""
        return {
            key: value
            for key, value in self.attributes.items()
            if key not in self.original or self.original[key] != value
        }

    def is_dirty(self) -> bool:
        return bool(self.get_dirty_attributes())

    def set_raw_attributes(self, attributes: dict[str, Any], sync: bool = False) -> None:
        """Replace the attribute bag without change tracking.

        Args:
            attributes: New attributes
            sync: Also mark them as the persisted original
        """
        self.attributes = dict(attributes)
        if sync:
            self.sync_original()

    def sync_original(self) -> None:
        self.original = dict(self.attributes)

    def local_attributes(self) -> dict[str, Any]:
        """Attributes the local store persists."""
        return {key: self.attributes.get(key) for key in self.local_fields}

    # Directory-backed accessors: the attached snapshot wins when it has a
    # value, otherwise whatever the account holds locally.

    @property
    def name(self) -> str | None:
        return _as_str(IDENTITY_MAPPING.resolve("name", self.identity, self.attributes))

    @property
    def email(self) -> str | None:
        return _as_str(
            IDENTITY_MAPPING.resolve("email", self.identity, self.attributes)
        )

    @property
    def phone(self) -> str | None:
        return _as_str(
            IDENTITY_MAPPING.resolve("phone", self.identity, self.attributes)
        )

    @property
    def avatar(self) -> str | None:
        return _as_str(
            IDENTITY_MAPPING.resolve("avatar", self.identity, self.attributes)
        )

    @property
    def disabled(self) -> bool:
        return bool(
            IDENTITY_MAPPING.resolve("disabled", self.identity, self.attributes)
        )

    @property
    def options(self) -> dict[str, Any]:
        return dict(
            IDENTITY_MAPPING.resolve("options", self.identity, self.attributes, {})
        )

    @property
    def email_verified(self) -> bool:
        return bool(
            IDENTITY_MAPPING.resolve(
                "email_verified", self.identity, self.attributes, False
            )
        )


def _as_str(value: Any) -> str | None:
    return str(value) if value is not None else None
