"""add media file folders and descriptions

Revision ID: 8d41e6b2c7f3
Revises: 3f1c2a9d7b10
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "8d41e6b2c7f3"
down_revision = "3f1c2a9d7b10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column(
        "media_files",
        sa.Column("original_name", sa.String(length=500), nullable=True),
    )
    op.add_column(
        "media_files",
        sa.Column("folder_path", sa.String(length=500), nullable=True),
    )
    op.add_column(
        "media_files",
        sa.Column("description", sa.Text(), nullable=True),
    )


def downgrade() -> None:
    op.drop_column("media_files", "description")
    op.drop_column("media_files", "folder_path")
    op.drop_column("media_files", "original_name")
