"""create accounts

Revision ID: 3c1f0a7d9b24
Revises:
Create Date: 2026-10-17 10:12:44.118302

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3c1f0a7d9b24"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        # Directory key, null until the first save reaches the directory
        sa.Column("uid", sa.String(128), nullable=True, unique=True),
        sa.Column("role", sa.String(50), nullable=False, server_default="member"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_accounts_role", "accounts", ["role"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_accounts_role", table_name="accounts")
    op.drop_table("accounts")
