"""Domain value objects for identity synchronization."""

from idbridge.domain.value.identifiers import AccountId, IdentityKey
from idbridge.domain.value.mapping import IDENTITY_MAPPING, AttributeMapping
from idbridge.domain.value.types import (
    IdentityAttributes,
    IdentityQuery,
    LifecycleEvent,
    QuerySortField,
    SortOrder,
)

__all__ = [
    # Identifiers
    "AccountId",
    "IdentityKey",
    # Mapping
    "AttributeMapping",
    "IDENTITY_MAPPING",
    # Types
    "IdentityAttributes",
    "IdentityQuery",
    "LifecycleEvent",
    "QuerySortField",
    "SortOrder",
]
