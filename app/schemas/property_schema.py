"""Pydantic schemas for Property API requests and responses."""
from datetime import date, datetime
from typing import Any, List, Literal, Optional
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.schemas.base_schema import CamelModel

Category = Literal["room", "flat", "house", "pg", "hostel", "commercial"]
Furnishing = Literal["unfurnished", "semi", "fully"]
OwnerType = Literal["owner", "agent", "builder"]

_OPTIONAL_NUMBERS = (
    "latitude", "longitude",
    "monthly_rent", "security_deposit", "maintenance_charge",
    "selling_price", "price_per_sqft", "booking_amount",
    "bedrooms", "bathrooms", "balconies", "floor_number", "total_floors",
    "built_up_area", "carpet_area",
)


def _blank_to_none(v: Any) -> Any:
    # multipart/form clients send "" for untouched inputs
    if isinstance(v, str) and not v.strip():
        return None
    return v


class PropertyFields(CamelModel):
    """Descriptive fields shared by create and update payloads."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    description: Optional[str] = None
    available_from: Optional[date] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    monthly_rent: Optional[float] = None
    security_deposit: Optional[float] = Field(None, ge=0)
    maintenance_charge: Optional[float] = Field(None, ge=0)
    preferred_tenants: Optional[str] = None
    lease_duration: Optional[str] = None

    selling_price: Optional[float] = None
    price_per_sqft: Optional[float] = Field(None, ge=0)
    possession_status: Optional[str] = None
    booking_amount: Optional[float] = Field(None, ge=0)
    loan_available: Optional[bool] = None

    negotiable: Optional[bool] = None

    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    balconies: Optional[int] = Field(None, ge=0)
    floor_number: Optional[int] = None
    total_floors: Optional[int] = Field(None, ge=0)
    built_up_area: Optional[float] = Field(None, ge=0)
    carpet_area: Optional[float] = Field(None, ge=0)

    amenities: Optional[List[str]] = None
    photos: Optional[List[str]] = None

    @field_validator(*_OPTIONAL_NUMBERS, mode="before")
    @classmethod
    def blank_numbers(cls, v):
        return _blank_to_none(v)


class PropertyCreate(PropertyFields):
    """Schema for creating a listing. Listing-type rules are checked by the service."""
    listing_type: Optional[str] = None
    category: Category
    title: str = Field(min_length=1, max_length=300)
    property_type: str = Field(min_length=1, max_length=100)
    furnishing: Furnishing
    available_from: date
    city: str = Field(min_length=1, max_length=100)
    address: str = Field(min_length=1, max_length=500)

    owner_name: str = Field(min_length=1, max_length=200)
    owner_phone: str = Field(min_length=1, max_length=40)
    owner_email: Optional[str] = ""
    owner_type: OwnerType = "owner"


class PropertyUpdate(PropertyFields):
    """Schema for partial updates (all fields optional)."""
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    property_type: Optional[str] = Field(None, min_length=1, max_length=100)
    furnishing: Optional[Furnishing] = None
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, min_length=1, max_length=500)


class StatusUpdate(CamelModel):
    status: Literal["active", "inactive"]


class AdminStatusAction(CamelModel):
    action: Literal["approve", "reject", "block", "unblock"]


class PropertyRead(CamelModel):
    """Full property representation."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: UUID
    listing_number: str
    slug: str
    category: str
    title: str
    property_type: str
    listing_type: Optional[str] = None
    description: Optional[str] = None
    furnishing: str
    available_from: Optional[date] = None
    city: str
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    monthly_rent: Optional[float] = None
    security_deposit: Optional[float] = None
    maintenance_charge: Optional[float] = None
    preferred_tenants: Optional[str] = None
    lease_duration: Optional[str] = None

    selling_price: Optional[float] = None
    price_per_sqft: Optional[float] = None
    possession_status: Optional[str] = None
    booking_amount: Optional[float] = None
    loan_available: Optional[bool] = None

    negotiable: Optional[bool] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    balconies: Optional[int] = None
    floor_number: Optional[int] = None
    total_floors: Optional[int] = None
    built_up_area: Optional[float] = None
    carpet_area: Optional[float] = None

    amenities: List[str] = []
    photos: List[str] = []

    owner_id: str
    owner_name: str
    owner_phone: str
    owner_email: Optional[str] = None
    owner_type: Optional[str] = None

    status: str
    is_deleted: bool
    featured: bool
    views: int
    favorites_count: int
    created_at: datetime
    updated_at: datetime

    @field_validator("amenities", mode="before")
    @classmethod
    def amenity_rows_to_names(cls, v):
        return [getattr(a, "name", a) for a in v or []]

    @field_validator("photos", mode="before")
    @classmethod
    def photo_rows_to_urls(cls, v):
        return [getattr(p, "url", p) for p in v or []]


class PropertyDetailRead(PropertyRead):
    """Single-property lookup result with its canonical path."""
    listing_type: str
    url_path: Optional[str] = None


class PropertySearchItem(PropertyRead):
    relevance_score: Optional[int] = None


class PropertyListPage(CamelModel):
    """GET listing page."""
    items: List[PropertySearchItem]
    total: int
    page: int
    page_size: int


class RelatedProperties(CamelModel):
    items: List[PropertyRead]



class FavoriteStatus(CamelModel):
    property_id: UUID
    favorited: bool
    favorites_count: int


class FavoriteProperties(CamelModel):
    items: List[PropertyRead]
