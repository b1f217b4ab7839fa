"""add reports_count to confessions

Revision ID: 0002_add_reports_count
Revises: 0001_create_confessions
Create Date: 2026-03-02 18:40:07.553910

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0002_add_reports_count"
down_revision: Union[str, Sequence[str], None] = "0001_create_confessions"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Add the report counter used to order the moderation queue."""
    with op.batch_alter_table("confessions") as batch_op:
        batch_op.add_column(
            sa.Column("reports_count", sa.Integer(), server_default="0", nullable=False)
        )


def downgrade() -> None:
    with op.batch_alter_table("confessions") as batch_op:
        batch_op.drop_column("reports_count")
