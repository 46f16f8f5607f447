"""Add vote_version and vote_score to posts.

Revision ID: 002_vote_cas
Revises: 001_initial
Create Date: 2026-10-09

vote_version is the compare-and-swap token for vote writes: two concurrent
votes on one post can no longer overwrite each other silently, the loser gets
a 409. vote_score (up - down) backs the popularity sort.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002_vote_cas"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "posts",
        sa.Column("vote_version", sa.Integer, nullable=False, server_default="0"),
    )
    op.add_column(
        "posts",
        sa.Column("vote_score", sa.Integer, nullable=False, server_default="0"),
    )
    op.execute(
        "UPDATE posts SET vote_score = "
        "json_array_length(up_vote) - json_array_length(down_vote)",
    )
    op.create_index("ix_posts_vote_score", "posts", ["vote_score"])


def downgrade() -> None:
    op.drop_index("ix_posts_vote_score", table_name="posts")
    op.drop_column("posts", "vote_score")
    op.drop_column("posts", "vote_version")
