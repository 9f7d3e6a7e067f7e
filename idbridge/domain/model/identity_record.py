"""Identity record entity.

Canonical snapshot of a user identity owned by the remote directory.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from idbridge.domain.model.common import DomainModel
from idbridge.domain.value import IdentityKey


class IdentityRecord(DomainModel):
    """Directory-owned identity (credentials, verification, claims).

    The uid is assigned by the directory and never changes. Records are
    read-only snapshots: a change is a new record returned by the directory.
    """

    uid: IdentityKey
    display_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    photo_url: Optional[str] = None
    disabled: bool = False
    email_verified: bool = False
    custom_claims: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
