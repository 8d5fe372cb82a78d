"""Add total_time_spent and soft delete columns

Revision ID: 002
Revises: 001
Create Date: 2026-10-05

"""
from typing import Sequence, Union

from alembic import op
from sqlalchemy import text

revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()

    # Check existing columns
    columns = {row[1] for row in conn.execute(text("PRAGMA table_info(tasks)")).fetchall()}

    if "total_time_spent" not in columns:
        conn.execute(text("ALTER TABLE tasks ADD COLUMN total_time_spent INTEGER DEFAULT 0"))
    if "is_deleted" not in columns:
        conn.execute(text("ALTER TABLE tasks ADD COLUMN is_deleted INTEGER DEFAULT 0"))

    # Every analytics query filters on owner + status
    conn.execute(text(
        "CREATE INDEX IF NOT EXISTS ix_tasks_owner_status ON tasks (assigned_to, status, is_deleted)"
    ))
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_tasks_parent ON tasks (parent_id)"))


def downgrade() -> None:
    conn = op.get_bind()
    conn.execute(text("DROP INDEX IF EXISTS ix_tasks_parent"))
    conn.execute(text("DROP INDEX IF EXISTS ix_tasks_owner_status"))
    # SQLite doesn't support DROP COLUMN easily; the columns stay
