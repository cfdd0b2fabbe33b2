"""Property service — creation, single-property lookup and owner/admin mutations.

Lookups resolve an identifier as a primary key first and fall back to the
slug. A type-scoped lookup that only finds the property under the other
listing type raises `WrongListingTypeError` so the client can redirect.

View counting is a single atomic UPDATE (views = views + 1). Concurrent
increments are not coordinated beyond that and may still be lost under
heavy contention; counts are best effort.
"""
import math
import re
import secrets
import string
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic.alias_generators import to_camel
from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import (
    BUY_SPECIFIC_FIELDS,
    LISTING_BUY,
    LISTING_RENT,
    LISTING_TYPES,
    RENT_SPECIFIC_FIELDS,
    STATUS_ACTIVE,
    STATUS_BLOCKED,
    STATUS_INACTIVE,
)
from app.core.exceptions import (
    DuplicateError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    WrongListingTypeError,
)
from app.core.identity import CallerIdentity
from app.core.logging import get_logger
from app.models.property_model import Property, PropertyAmenity, PropertyFavorite, PropertyPhoto
from app.schemas.property_schema import (
    PropertyCreate,
    PropertyDetailRead,
    PropertyRead,
    PropertyUpdate,
)
from app.services.filter_normalizer import dedupe
from app.services.listing_types import PRICE_FIELDS, ListingTypeConfig, config_for
from app.services.query_builder import listing_type_clause, visibility_clauses

logger = get_logger(__name__)

SLUG_MAX_SOURCE = 120
SLUG_ATTEMPTS = 6

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits

# columns that are NOT NULL on the model; a null in an update is ignored
_REQUIRED_FIELDS = ("title", "property_type", "furnishing", "city", "address", "available_from", "negotiable")

_WRONG_TYPE_MESSAGES = {
    LISTING_RENT: "This property is listed for sale, not rent",
    LISTING_BUY: "This property is listed for rent, not sale",
}

MODERATION_ACTIONS = {
    "approve": STATUS_ACTIVE,
    "unblock": STATUS_ACTIVE,
    "reject": STATUS_INACTIVE,
    "block": STATUS_BLOCKED,
}


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", str(text or "").lower()).strip("-")


def random_suffix(length: int = 4) -> str:
    return "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(length))


def make_listing_number(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"LIST-{now:%Y%m%d%H%M%S}-{random_suffix(4).upper()}"


async def make_unique_slug(db: AsyncSession, base: str) -> str:
    base = base or "property"
    candidate = base
    for _ in range(SLUG_ATTEMPTS):
        taken = (await db.execute(select(Property.id).where(Property.slug == candidate))).first()
        if not taken:
            return candidate
        candidate = f"{base}-{random_suffix(3)}"
    return f"{base}-{uuid.uuid4().hex[-6:]}"


def parse_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def url_path(prop: Property) -> Optional[str]:
    if not prop.slug:
        return None
    return f"/{prop.effective_listing_type}/{prop.slug}"


def to_detail(prop: Property) -> PropertyDetailRead:
    data = PropertyRead.model_validate(prop).model_dump()
    data["listing_type"] = prop.effective_listing_type
    data["url_path"] = url_path(prop)
    return PropertyDetailRead(**data)


# ---------------------------------------------------------------------------
# Listing-type rules
# ---------------------------------------------------------------------------

def _camel_list(fields: List[str]) -> List[str]:
    return [to_camel(f) for f in fields]


def _require_positive_price(data: Dict[str, Any], listing_type: str) -> None:
    field = PRICE_FIELDS[listing_type]
    name = to_camel(field)
    value = data.get(field)
    if value is None:
        raise ValidationError(f"{name} is required for {listing_type} properties", detail={"field": name})
    if value <= 0:
        raise ValidationError(f"{name} must be a positive number", detail={"field": name})


def validate_listing_fields(data: Dict[str, Any], listing_type: str) -> None:
    """A rent record needs a positive monthly rent and no sale fields, and vice versa.

    Buy records tolerate empty/false rent fields (form clients send them).
    """
    _require_positive_price(data, listing_type)

    if listing_type == LISTING_RENT:
        present = [f for f in BUY_SPECIFIC_FIELDS if data.get(f) is not None]
    else:
        present = [f for f in RENT_SPECIFIC_FIELDS if data.get(f) not in (None, "", False)]

    if present:
        names = _camel_list(present)
        raise ValidationError(
            f"{', '.join(names)} not allowed for {listing_type} properties",
            detail={"fields": names},
        )


def validate_update_fields(prop: Property, data: Dict[str, Any]) -> None:
    listing_type = prop.effective_listing_type
    foreign = BUY_SPECIFIC_FIELDS if listing_type == LISTING_RENT else RENT_SPECIFIC_FIELDS
    present = [f for f in foreign if data.get(f) not in (None, "")]
    if present:
        names = _camel_list(present)
        raise ValidationError(
            f"{', '.join(names)} not allowed for {listing_type} properties",
            detail={"fields": names},
        )
    if PRICE_FIELDS[listing_type] in data:
        _require_positive_price(data, listing_type)


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

async def create_property(
    db: AsyncSession,
    payload: PropertyCreate,
    caller: CallerIdentity,
    listing_type: Optional[str] = None,
) -> Property:
    """Create a listing. `listing_type` is set by the type-scoped endpoints."""
    if listing_type and payload.listing_type and payload.listing_type != listing_type:
        raise ValidationError(
            f"This endpoint only accepts {listing_type} properties",
            detail={"field": "listingType"},
        )
    listing_type = listing_type or payload.listing_type
    if not listing_type:
        raise ValidationError("listingType is required", detail={"field": "listingType"})
    if listing_type not in LISTING_TYPES:
        raise ValidationError("listingType must be 'rent' or 'buy'", detail={"field": "listingType"})

    data = payload.model_dump(exclude={"listing_type", "amenities", "photos"})
    validate_listing_fields(data, listing_type)

    slug = await make_unique_slug(db, slugify(f"{payload.title}-{payload.city}"[:SLUG_MAX_SOURCE]))

    prop = Property(
        **{k: v for k, v in data.items() if v is not None},
        listing_type=listing_type,
        slug=slug,
        listing_number=make_listing_number(),
        owner_id=caller.user_id,
        amenities=[PropertyAmenity(name=a) for a in dedupe(payload.amenities or [])],
        photos=[PropertyPhoto(url=u, position=i) for i, u in enumerate(payload.photos or [])],
    )
    db.add(prop)
    try:
        await db.flush()
    except IntegrityError as e:
        raise DuplicateError(f"Property slug '{slug}' already exists, retry the request") from e

    logger.info(
        "Property created: %s",
        prop.slug,
        extra={"property_id": str(prop.id), "listing_type": listing_type},
    )
    return prop


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

async def find_listing(db: AsyncSession, identifier: str, config: ListingTypeConfig) -> Property:
    """Publicly visible property by id or slug, scoped to `config`."""
    visible = visibility_clauses(config)
    property_id = parse_uuid(identifier)

    prop = None
    if property_id is not None:
        prop = (await db.execute(
            select(Property).where(Property.id == property_id, *visible)
        )).scalar_one_or_none()
    if prop is None:
        prop = (await db.execute(
            select(Property).where(Property.slug == identifier, *visible)
        )).scalar_one_or_none()
    if prop is not None:
        return prop

    other = config.other_listing_type
    if other is not None:
        matches = [Property.slug == identifier]
        if property_id is not None:
            matches.append(Property.id == property_id)
        misplaced = (await db.execute(
            select(Property)
            .where(or_(*matches), Property.is_deleted.is_(False), *listing_type_clause(config_for(other)))
            .limit(1)
        )).scalar_one_or_none()
        if misplaced is not None:
            raise WrongListingTypeError(
                _WRONG_TYPE_MESSAGES[config.listing_type],
                detail={"listing_type": other, "url_path": url_path(misplaced)},
            )

    if config.listing_type:
        raise NotFoundError(f"The requested {config.listing_type} property could not be found")
    raise NotFoundError(f"Property '{identifier}' not found")


async def increment_views(db: AsyncSession, prop: Property) -> None:
    await db.execute(
        update(Property)
        .where(Property.id == prop.id)
        .values(views=Property.views + 1, updated_at=Property.updated_at)
    )


async def related_properties(db: AsyncSession, identifier: str, limit: int) -> List[Property]:
    """Same city, category and listing type, price within ±25% (at least 1000)."""
    base = (await db.execute(
        select(Property).where(Property.slug == identifier, Property.is_deleted.is_(False))
    )).scalar_one_or_none()
    property_id = parse_uuid(identifier)
    if base is None and property_id is not None:
        base = (await db.execute(
            select(Property).where(Property.id == property_id, Property.is_deleted.is_(False))
        )).scalar_one_or_none()
    if base is None:
        raise NotFoundError("Base property not found")

    config = config_for(base.listing_type)
    price_column = getattr(Property, config.price_field)
    price = float(getattr(base, config.price_field) or 0)
    delta = max(1000, math.floor(price * 0.25))

    stmt = (
        select(Property)
        .where(
            Property.id != base.id,
            *visibility_clauses(config),
            Property.city == base.city,
            Property.category == base.category,
            price_column.between(max(0, price - delta), price + delta),
        )
        .order_by(Property.featured.desc(), Property.created_at.desc(), Property.id.asc())
        .limit(limit)
    )
    return list((await db.execute(stmt)).scalars().all())


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

async def get_property_for_update(
    db: AsyncSession,
    property_id: str,
    caller: CallerIdentity,
    allow_admin: bool = True,
    include_deleted: bool = False,
) -> Property:
    pid = parse_uuid(property_id)
    if pid is None:
        raise ValidationError("Invalid property ID", detail={"field": "id"})

    prop = await db.get(Property, pid)
    if prop is None or (prop.is_deleted and not include_deleted):
        raise NotFoundError("Property not found")

    is_owner = prop.owner_id == caller.user_id
    if not is_owner and not (allow_admin and caller.is_admin):
        raise ForbiddenError("You do not have permission to modify this property")
    return prop


async def update_property(db: AsyncSession, prop: Property, payload: PropertyUpdate) -> Property:
    data = payload.model_dump(exclude_unset=True)
    amenities = data.pop("amenities", None)
    photos = data.pop("photos", None)

    validate_update_fields(prop, data)

    for field, value in data.items():
        if value is None and field in _REQUIRED_FIELDS:
            continue
        setattr(prop, field, value)

    if amenities is not None:
        prop.amenities = [PropertyAmenity(name=a) for a in dedupe(amenities)]
    if photos is not None:
        prop.photos = [PropertyPhoto(url=u, position=i) for i, u in enumerate(photos)]

    await db.flush()
    return prop


async def update_status(db: AsyncSession, prop: Property, status: str) -> Property:
    """Owner toggle between active and inactive. Blocked listings stay blocked."""
    if prop.status == STATUS_BLOCKED:
        raise ForbiddenError("This property has been blocked by an administrator")
    prop.status = status
    await db.flush()
    logger.info("Property status set to %s", status, extra={"property_id": str(prop.id)})
    return prop


async def moderate(db: AsyncSession, prop: Property, action: str) -> Property:
    prop.status = MODERATION_ACTIONS[action]
    await db.flush()
    logger.info("Property moderated: %s", action, extra={"property_id": str(prop.id)})
    return prop


async def soft_delete(db: AsyncSession, prop: Property) -> None:
    prop.is_deleted = True
    await db.flush()
    logger.info("Property soft-deleted", extra={"property_id": str(prop.id)})


async def hard_delete(db: AsyncSession, prop: Property) -> None:
    # SQLite does not enforce the FK cascade
    await db.execute(delete(PropertyFavorite).where(PropertyFavorite.property_id == prop.id))
    await db.delete(prop)
    await db.flush()
    logger.info("Property deleted permanently", extra={"property_id": str(prop.id)})
