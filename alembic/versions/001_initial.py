"""Initial migration — properties, amenities and photos.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── properties ──
    op.create_table(
        "properties",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("listing_number", sa.String(40), unique=True, nullable=False),
        sa.Column("slug", sa.String(160), unique=True, nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("property_type", sa.String(100), nullable=False),
        sa.Column("listing_type", sa.String(10), nullable=True),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("furnishing", sa.String(20), nullable=False),
        sa.Column("available_from", sa.Date, nullable=True),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        # rent
        sa.Column("monthly_rent", sa.Numeric(14, 2), nullable=True),
        sa.Column("security_deposit", sa.Numeric(14, 2), nullable=True),
        sa.Column("maintenance_charge", sa.Numeric(14, 2), nullable=True),
        sa.Column("preferred_tenants", sa.String(50), nullable=True),
        sa.Column("lease_duration", sa.String(50), nullable=True),
        # buy
        sa.Column("selling_price", sa.Numeric(14, 2), nullable=True),
        sa.Column("price_per_sqft", sa.Numeric(14, 2), nullable=True),
        sa.Column("possession_status", sa.String(50), nullable=True),
        sa.Column("booking_amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("loan_available", sa.Boolean, nullable=True),
        sa.Column("negotiable", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("bedrooms", sa.Integer, nullable=True),
        sa.Column("bathrooms", sa.Integer, nullable=True),
        sa.Column("balconies", sa.Integer, nullable=True),
        sa.Column("floor_number", sa.Integer, nullable=True),
        sa.Column("total_floors", sa.Integer, nullable=True),
        sa.Column("built_up_area", sa.Float, nullable=True),
        sa.Column("carpet_area", sa.Float, nullable=True),
        # owner snapshot
        sa.Column("owner_id", sa.String(64), nullable=False),
        sa.Column("owner_name", sa.String(200), nullable=False),
        sa.Column("owner_phone", sa.String(40), nullable=False),
        sa.Column("owner_email", sa.String(200), nullable=False, server_default=""),
        sa.Column("owner_type", sa.String(20), nullable=False, server_default="owner"),
        # lifecycle
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("featured", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("views", sa.Integer, nullable=False, server_default="0"),
        sa.Column("favorites_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_properties_owner_id", "properties", ["owner_id"])
    op.create_index("ix_properties_city", "properties", ["city"])
    op.create_index("ix_properties_visibility", "properties", ["is_deleted", "status", "listing_type"])
    op.create_index("ix_properties_monthly_rent", "properties", ["monthly_rent"])
    op.create_index("ix_properties_selling_price", "properties", ["selling_price"])
    op.create_index("ix_properties_created_at", "properties", ["created_at"])

    # ── property_amenities ──
    op.create_table(
        "property_amenities",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("property_id", sa.Uuid, sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
    )
    op.create_index("ix_property_amenities_property_id", "property_amenities", ["property_id"])
    op.create_index("ix_property_amenities_name", "property_amenities", ["name"])

    # ── property_photos ──
    op.create_table(
        "property_photos",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("property_id", sa.Uuid, sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_property_photos_property_id", "property_photos", ["property_id"])


def downgrade() -> None:
    op.drop_table("property_photos")
    op.drop_table("property_amenities")
    op.drop_table("properties")
