"""Create documents table for driver, unit and route records.

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "documents",
        sa.Column("collection", sa.String(50), primary_key=True),
        sa.Column("id", sa.String(32), primary_key=True),
        sa.Column("data", JSONB, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_documents_collection_created", "documents", ["collection", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_documents_collection_created", table_name="documents")
    op.drop_table("documents")
