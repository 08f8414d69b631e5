"""create_orders

Revision ID: 0001
Revises:
Create Date: 2026-10-19 16:40:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Orders table (ULID stored as UUID, status stored as plain string)
    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("code", sa.String(length=32), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code", name="uq_orders_code"),
    )
    op.create_index(op.f("ix_orders_status"), "orders", ["status"], unique=False)

    # Only one order may hold the preparation slot
    op.create_index(
        "uq_orders_single_preparing",
        "orders",
        ["status"],
        unique=True,
        postgresql_where=sa.text("status = 'preparing'"),
        sqlite_where=sa.text("status = 'preparing'"),
    )


def downgrade() -> None:
    op.drop_index("uq_orders_single_preparing", table_name="orders")
    op.drop_index(op.f("ix_orders_status"), table_name="orders")
    op.drop_table("orders")
