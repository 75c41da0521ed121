"""create documents

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("originalName", sa.String(length=255), nullable=False),
        sa.Column("fileSize", sa.Integer(), nullable=False),
        sa.Column("uploadDate", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("filename"),
        sqlite_autoincrement=True,
    )
    op.create_index(op.f("ix_documents_uploadDate"), "documents", ["uploadDate"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_documents_uploadDate"), table_name="documents")
    op.drop_table("documents")
