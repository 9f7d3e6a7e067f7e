"""Strongly typed identifiers.

The directory uid is an opaque provider string; local accounts use UUIDs.
"""

from typing import NewType
from uuid import UUID

IdentityKey = NewType("IdentityKey", str)
AccountId = NewType("AccountId", UUID)
