"""Property SQLAlchemy model — rent and sale listings in a single table."""
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    listing_number: Mapped[str] = mapped_column(String(40), unique=True, comment="LIST-YYYYMMDDHHMMSS-XXXX")
    slug: Mapped[str] = mapped_column(String(160), unique=True, comment="SEO path segment, unique")

    category: Mapped[str] = mapped_column(String(20), comment="room, flat, house, pg, hostel, commercial")
    title: Mapped[str] = mapped_column(String(300))
    property_type: Mapped[str] = mapped_column(String(100), comment="Free-form label: 2BHK, Single Room ...")
    listing_type: Mapped[Optional[str]] = mapped_column(String(10), comment="rent, buy; NULL on legacy rows (= rent)")
    description: Mapped[str] = mapped_column(Text, default="")
    furnishing: Mapped[str] = mapped_column(String(20), comment="unfurnished, semi, fully")
    available_from: Mapped[Optional[date]] = mapped_column(Date)

    city: Mapped[str] = mapped_column(String(100))
    address: Mapped[str] = mapped_column(String(500))
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)

    # rent only
    monthly_rent: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2))
    security_deposit: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2))
    maintenance_charge: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2))
    preferred_tenants: Mapped[Optional[str]] = mapped_column(String(50))
    lease_duration: Mapped[Optional[str]] = mapped_column(String(50))

    # buy only
    selling_price: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2))
    price_per_sqft: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2))
    possession_status: Mapped[Optional[str]] = mapped_column(String(50))
    booking_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2))
    loan_available: Mapped[Optional[bool]] = mapped_column(Boolean)

    negotiable: Mapped[bool] = mapped_column(Boolean, default=False)

    bedrooms: Mapped[Optional[int]] = mapped_column(Integer)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer)
    balconies: Mapped[Optional[int]] = mapped_column(Integer)
    floor_number: Mapped[Optional[int]] = mapped_column(Integer)
    total_floors: Mapped[Optional[int]] = mapped_column(Integer)
    built_up_area: Mapped[Optional[float]] = mapped_column(Float)
    carpet_area: Mapped[Optional[float]] = mapped_column(Float)

    # owner snapshot taken at creation time
    owner_id: Mapped[str] = mapped_column(String(64), index=True)
    owner_name: Mapped[str] = mapped_column(String(200))
    owner_phone: Mapped[str] = mapped_column(String(40))
    owner_email: Mapped[str] = mapped_column(String(200), default="")
    owner_type: Mapped[str] = mapped_column(String(20), default="owner")

    status: Mapped[str] = mapped_column(String(20), default="active", comment="active, inactive, blocked")
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    views: Mapped[int] = mapped_column(Integer, default=0)
    favorites_count: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    amenities: Mapped[List["PropertyAmenity"]] = relationship(
        back_populates="property", cascade="all, delete-orphan", lazy="selectin",
    )
    photos: Mapped[List["PropertyPhoto"]] = relationship(
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyPhoto.position",
    )

    __table_args__ = (
        Index("ix_properties_city", "city"),
        Index("ix_properties_visibility", "is_deleted", "status", "listing_type"),
        Index("ix_properties_monthly_rent", "monthly_rent"),
        Index("ix_properties_selling_price", "selling_price"),
        Index("ix_properties_created_at", "created_at"),
    )

    @property
    def effective_listing_type(self) -> str:
        """Listing type with the legacy default applied (missing = rent)."""
        return self.listing_type or "rent"

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, slug='{self.slug}', type={self.listing_type})>"


class PropertyAmenity(Base):
    __tablename__ = "property_amenities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), index=True)

    property: Mapped["Property"] = relationship(back_populates="amenities")

    def __repr__(self) -> str:
        return f"<PropertyAmenity(property_id={self.property_id}, name='{self.name}')>"


class PropertyPhoto(Base):
    __tablename__ = "property_photos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        index=True,
    )
    url: Mapped[str] = mapped_column(String(2048))
    position: Mapped[int] = mapped_column(Integer, default=0, comment="Display order")

    property: Mapped["Property"] = relationship(back_populates="photos")

    def __repr__(self) -> str:
        return f"<PropertyPhoto(position={self.position}, url='{self.url[:60]}...')>"


class PropertyFavorite(Base):
    """One user's favorite mark on one property."""

    __tablename__ = "property_favorites"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="CASCADE"),
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "property_id", name="uq_property_favorites_user_property"),
    )

    def __repr__(self) -> str:
        return f"<PropertyFavorite(user_id='{self.user_id}', property_id={self.property_id})>"
