"""Per-user favorites.

Revision ID: 002_property_favorites
Revises: 001_initial
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002_property_favorites"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "property_favorites",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("property_id", sa.Uuid, sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "property_id", name="uq_property_favorites_user_property"),
    )
    op.create_index("ix_property_favorites_user_id", "property_favorites", ["user_id"])
    op.create_index("ix_property_favorites_property_id", "property_favorites", ["property_id"])


def downgrade() -> None:
    op.drop_table("property_favorites")
