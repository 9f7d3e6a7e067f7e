"""Signed link utilities for e-mail verification callbacks."""

from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

import jwt
from pydantic import BaseModel

from idbridge.config import DirectorySettings
from idbridge.util.error import SigningError


class VerificationPayload(BaseModel):
    """Payload carried by a verification link."""

    uid: str
    exp: datetime


def create_verification_url(uid: str, settings: DirectorySettings) -> str:
    """Create a signed, expiring verification URL for an identity.

    Args:
        uid: Identity uid the link verifies
        settings: Directory settings (verify URL, secret, lifetime)

    Returns:
        Verification URL with a ``signature`` query parameter
    """
    expiry = datetime.now(timezone.utc) + timedelta(
        minutes=settings.verify_link_ttl_minutes
    )
    token = jwt.encode(
        {"uid": uid, "exp": expiry},
        settings.signing_secret,
        algorithm=settings.signing_algorithm,
    )
    return f"{settings.verify_url}?{urlencode({'uid': uid, 'signature': token})}"


def verify_signature(token: str, settings: DirectorySettings) -> VerificationPayload:
    """Verify a verification link signature.

    Public helper for the endpoint behind ``verify_url``: it checks the
    ``signature`` parameter that ``create_verification_url`` put on the
    link sent by ``send_verification_email``.

    Args:
        token: The ``signature`` query parameter
        settings: Directory settings

    Returns:
        Decoded payload

    Raises:
        SigningError: If the signature is invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.signing_secret, algorithms=[settings.signing_algorithm]
        )
        return VerificationPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise SigningError("Verification link has expired")
    except jwt.InvalidTokenError:
        raise SigningError("Invalid verification link")
