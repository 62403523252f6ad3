"""questions and generation status"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_questions_status"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "searches",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("query", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=True),
        sa.Column("result", sa.JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=True),
        sa.Column("user_id", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_searches_slug", "searches", ["slug"], unique=False)
    op.create_index("ix_searches_created_at", "searches", ["created_at"], unique=False)
    op.create_index(
        "ix_searches_query_normalized",
        "searches",
        [sa.text("lower(trim(query))")],
        unique=False,
    )

    status = op.create_table(
        "generation_status",
        sa.Column("key", sa.String(length=64), nullable=False),
        sa.Column("is_generating", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("target", sa.Integer(), nullable=False, server_default="500"),
        sa.Column("started_at", sa.DateTime(), nullable=True),
        sa.Column("last_run_at", sa.DateTime(), nullable=True),
        sa.Column("owner_user_id", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("key"),
    )
    op.bulk_insert(
        status,
        [{"key": "generation_status", "is_generating": False, "progress": 0, "target": 500}],
    )


def downgrade() -> None:
    op.drop_table("generation_status")
    op.drop_index("ix_searches_query_normalized", table_name="searches")
    op.drop_index("ix_searches_created_at", table_name="searches")
    op.drop_index("ix_searches_slug", table_name="searches")
    op.drop_table("searches")
