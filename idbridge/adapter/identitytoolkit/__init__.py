"""Identity Toolkit (Firebase Authentication) REST adapter."""

from .client import IdentityToolkitClient
from .messages import message_for

__all__ = [
    "IdentityToolkitClient",
    "message_for",
]
