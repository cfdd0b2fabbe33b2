"""Query builder — SearchCriteria to a list of WHERE clauses.

The returned list is a conjunction; callers pass it to `.where(*clauses)`.
Both the page query and the count query are built from the same list.
"""
from typing import List

from sqlalchemy import ColumnElement, case, func, or_

from app.core.constants import BEDROOMS_OPEN_ENDED, STATUS_ACTIVE
from app.models.property_model import Property, PropertyAmenity
from app.services.filter_normalizer import SearchCriteria
from app.services.listing_types import ListingTypeConfig

TITLE_WEIGHT = 10
CATEGORY_WEIGHT = 5
PROPERTY_TYPE_WEIGHT = 3


def _contains(column, text: str) -> ColumnElement[bool]:
    # autoescape: % and _ in user input are literals
    return column.icontains(text, autoescape=True)


def listing_type_clause(config: ListingTypeConfig) -> List[ColumnElement[bool]]:
    if config.listing_type is None:
        return []
    if config.include_legacy:
        return [or_(Property.listing_type == config.listing_type, Property.listing_type.is_(None))]
    return [Property.listing_type == config.listing_type]


def visibility_clauses(config: ListingTypeConfig) -> List[ColumnElement[bool]]:
    """Public visibility: not soft-deleted, active, right listing type."""
    return [
        Property.is_deleted.is_(False),
        Property.status == STATUS_ACTIVE,
        *listing_type_clause(config),
    ]


def text_clause(text: str) -> ColumnElement[bool]:
    return or_(
        _contains(Property.title, text),
        _contains(Property.description, text),
        _contains(Property.category, text),
        _contains(Property.property_type, text),
        _contains(Property.city, text),
    )


def location_clause(location: str) -> ColumnElement[bool]:
    return or_(
        _contains(Property.city, location),
        _contains(Property.address, location),
    )


def bedrooms_clause(criteria: SearchCriteria) -> ColumnElement[bool]:
    options = [Property.bedrooms == count for count in criteria.bedrooms]
    if criteria.bedrooms_open_ended:
        options.append(Property.bedrooms >= BEDROOMS_OPEN_ENDED)
    return or_(*options)


def price_clauses(criteria: SearchCriteria, config: ListingTypeConfig) -> List[ColumnElement[bool]]:
    """Default bounds (0 and the ceiling) add nothing."""
    if criteria.price_range is None:
        return []
    column = getattr(Property, config.price_field)
    clauses = []
    if criteria.price_range.min > 0:
        clauses.append(column >= criteria.price_range.min)
    if criteria.price_range.max < config.price_ceiling:
        clauses.append(column <= criteria.price_range.max)
    return clauses


def build_match_clauses(criteria: SearchCriteria, config: ListingTypeConfig) -> List[ColumnElement[bool]]:
    clauses = visibility_clauses(config)

    if criteria.text:
        clauses.append(text_clause(criteria.text))
    if criteria.location:
        clauses.append(location_clause(criteria.location))

    if criteria.category:
        clauses.append(func.lower(Property.category) == criteria.category.lower())
    if criteria.property_type:
        clauses.append(_contains(Property.property_type, criteria.property_type))

    clauses.extend(price_clauses(criteria, config))

    if criteria.bedrooms or criteria.bedrooms_open_ended:
        clauses.append(bedrooms_clause(criteria))

    # every requested amenity must be present
    for amenity in criteria.amenities:
        clauses.append(Property.amenities.any(PropertyAmenity.name == amenity))

    if criteria.furnishing:
        clauses.append(Property.furnishing.in_(criteria.furnishing))

    for key, value in criteria.extra.items():
        if key in config.extra_filters:
            clauses.append(getattr(Property, key) == value)

    if criteria.owner_id:
        clauses.append(Property.owner_id == criteria.owner_id)

    return clauses


def relevance_score(text: str) -> ColumnElement[int]:
    """Additive text relevance: title 10, category 5, property type 3."""
    return (
        case((_contains(Property.title, text), TITLE_WEIGHT), else_=0)
        + case((_contains(Property.category, text), CATEGORY_WEIGHT), else_=0)
        + case((_contains(Property.property_type, text), PROPERTY_TYPE_WEIGHT), else_=0)
    )
