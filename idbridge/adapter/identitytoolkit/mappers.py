"""Mappers between Identity Toolkit JSON and domain models.

The REST API speaks camelCase, stores custom claims as a JSON string and
timestamps as epoch milliseconds.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict

from idbridge.domain.model import IdentityRecord
from idbridge.domain.value import IdentityKey, QuerySortField

# Directory field name -> REST field name
FIELD_NAMES: Dict[str, str] = {
    "uid": "localId",
    "email": "email",
    "display_name": "displayName",
    "phone_number": "phoneNumber",
    "photo_url": "photoUrl",
    "password": "password",
    "email_verified": "emailVerified",
    "disabled": "disabled",
}

# Attributes cleared with deleteAttribute when updated to None
DELETABLE_ATTRIBUTES: Dict[str, str] = {
    "display_name": "DISPLAY_NAME",
    "photo_url": "PHOTO_URL",
}

SORT_FIELDS: Dict[QuerySortField, str] = {
    QuerySortField.UID: "USER_ID",
    QuerySortField.EMAIL: "USER_EMAIL",
    QuerySortField.DISPLAY_NAME: "NAME",
    QuerySortField.CREATED_AT: "CREATED_AT",
    QuerySortField.LAST_LOGIN_AT: "LAST_LOGIN_AT",
}


def _from_millis(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


def user_info_to_record(info: Dict[str, Any]) -> IdentityRecord:
    """Convert an Identity Toolkit user info object to an IdentityRecord.

    Args:
        info: ``users[]`` / ``userInfo[]`` entry

    Returns:
        IdentityRecord domain model
    """
    claims = info.get("customAttributes")
    return IdentityRecord(
        uid=IdentityKey(info["localId"]),
        display_name=info.get("displayName"),
        email=info.get("email"),
        phone_number=info.get("phoneNumber"),
        photo_url=info.get("photoUrl"),
        disabled=bool(info.get("disabled", False)),
        email_verified=bool(info.get("emailVerified", False)),
        custom_claims=json.loads(claims) if claims else {},
        created_at=_from_millis(info.get("createdAt")),
        last_login_at=_from_millis(info.get("lastLoginAt")),
    )


def create_payload(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Build an ``accounts`` (create) request body.

    Args:
        fields: Directory-named fields; None values are omitted

    Returns:
        REST request body
    """
    return {
        FIELD_NAMES[name]: value
        for name, value in fields.items()
        if name in FIELD_NAMES and value is not None
    }


def update_payload(uid: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Build an ``accounts:update`` request body.

    None clears display name and photo URL, and unlinks the phone number.

    Args:
        uid: Identity to update
        fields: Directory-named fields

    Returns:
        REST request body
    """
    payload: Dict[str, Any] = {"localId": uid}
    delete_attributes: list[str] = []

    for name, value in fields.items():
        if name == "uid" or name not in FIELD_NAMES:
            continue
        if value is None:
            if name in DELETABLE_ATTRIBUTES:
                delete_attributes.append(DELETABLE_ATTRIBUTES[name])
            elif name == "phone_number":
                payload["deleteProvider"] = ["phone"]
            continue
        if name == "disabled":
            payload["disableUser"] = value
        else:
            payload[FIELD_NAMES[name]] = value

    if delete_attributes:
        payload["deleteAttribute"] = delete_attributes
    return payload
