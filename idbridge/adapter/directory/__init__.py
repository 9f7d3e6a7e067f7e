"""Identity directory implementations."""

from .client import IdentityDirectoryClient
from .fake import FakeIdentityDirectory

__all__ = [
    "FakeIdentityDirectory",
    "IdentityDirectoryClient",
]
