"""Mappers for converting between database rows and domain models.

Accounts carry a mutable attribute bag, so rows are mapped by hand instead
of through SQLAlchemy's ORM.
"""

from typing import Any, Dict
from uuid import UUID

from idbridge.domain.model import Account
from idbridge.domain.value import AccountId


def row_to_account(row: Dict[str, Any]) -> Account:
    """Convert database row to a persisted Account.

    Args:
        row: Database row as dict

    Returns:
        Account marked as existing, with no pending changes
    """
    attributes = dict(row)
    raw_id = attributes["id"]
    attributes["id"] = AccountId(UUID(raw_id) if isinstance(raw_id, str) else raw_id)
    account = Account(attributes=attributes, exists=True)
    account.sync_original()
    return account


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert Account to database dict.

    Args:
        account: Account domain model

    Returns:
        Locally owned columns only, suitable for insert/update
    """
    return account.local_attributes()
