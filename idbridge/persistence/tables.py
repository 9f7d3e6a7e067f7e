"""SQLAlchemy table definitions for local accounts.

Only locally owned columns live here. Everything the identity directory
owns (name, e-mail, phone, avatar, claims, ...) is read from the directory.
"""

from sqlalchemy import Column, DateTime, Index, MetaData, String, Table, Uuid

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# ACCOUNTS TABLE
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("uid", String(128), nullable=True, unique=True),  # Directory key
    Column("role", String(50), nullable=False, server_default="member"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

Index("idx_accounts_role", accounts_table.c.role)
