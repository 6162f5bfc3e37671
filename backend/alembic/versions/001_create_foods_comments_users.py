"""Create foods, comments and users tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: food posts, the comment board, and users.
How:   Portable column types (sa.Uuid, timezone-aware DateTime) so the same
       revision runs on PostgreSQL and SQLite. Ids are generated by the
       application, not by the database.

Rollback: downgrade() drops all three tables (all data lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "foods",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("link", sa.String(2048), nullable=True),
        sa.Column("image_url", sa.String(2048), nullable=True),
        sa.Column("image_id", sa.String(255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(100), nullable=True),
        sa.Column("restaurant_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_foods"),
        sa.CheckConstraint(
            "(image_url IS NULL) = (image_id IS NULL)",
            name="ck_foods_image_fields_together",
        ),
    )

    op.create_table(
        "comments",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("message", sa.String(140), nullable=False),
        sa.Column("likes", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_comments"),
        sa.CheckConstraint(
            "length(message) >= 5 AND length(message) <= 140",
            name="ck_comments_message_length",
        ),
        sa.CheckConstraint("likes >= 0", name="ck_comments_likes_non_negative"),
    )
    # Serves GET /: latest 20 by created_at
    op.create_index(
        "idx_comments_created_at",
        "comments",
        [sa.text("created_at DESC")],
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(10), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("access_token", sa.String(1024), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.CheckConstraint(
            "length(name) >= 1 AND length(name) <= 10",
            name="ck_users_name_length",
        ),
    )
    op.create_index("ix_users_name", "users", ["name"])
    op.create_index("ix_users_access_token", "users", ["access_token"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_users_access_token", table_name="users")
    op.drop_index("ix_users_name", table_name="users")
    op.drop_table("users")
    op.drop_index("idx_comments_created_at", table_name="comments")
    op.drop_table("comments")
    op.drop_table("foods")
