"""PostgreSQL repository implementations."""

from idbridge.persistence.repository.account import PostgresAccountRepository

__all__ = [
    "PostgresAccountRepository",
]
