"""Domain model entities for identity synchronization."""

from idbridge.domain.model.account import Account
from idbridge.domain.model.call_record import CallRecord
from idbridge.domain.model.identity_record import IdentityRecord

__all__ = [
    "Account",
    "CallRecord",
    "IdentityRecord",
]
