"""Sort resolver — sort key to ORDER BY clauses.

Every ordering ends with created_at desc (newest first) and the primary key,
so paging through equal prices or equal scores is stable between requests.
"""
from typing import Any, List, Optional

from sqlalchemy import ColumnElement

from app.models.property_model import Property
from app.services.listing_types import ListingTypeConfig

DEFAULT_SORT = "newest"

SORT_KEYS = (
    "newest",
    "oldest",
    "price_low_to_high",
    "price_high_to_low",
    "featured",
    "popular",
    "relevance",
)

SORT_ALIASES = {
    "rent_low_to_high": "price_low_to_high",
    "rent_high_to_low": "price_high_to_low",
    "rent_low": "price_low_to_high",
    "rent_high": "price_high_to_low",
    "price_low": "price_low_to_high",
    "price_high": "price_high_to_low",
}

# sort keys under which a text query reorders by relevance
RELEVANCE_SORTS = ("newest", "relevance")


def canonical_sort(value: Any) -> str:
    """Map a client sort key onto SORT_KEYS; unknown keys become `newest`."""
    if not isinstance(value, str):
        return DEFAULT_SORT
    key = value.strip().lower()
    key = SORT_ALIASES.get(key, key)
    return key if key in SORT_KEYS else DEFAULT_SORT


def resolve_sort(
    sort_key: str,
    config: ListingTypeConfig,
    relevance: Optional[ColumnElement] = None,
) -> List[ColumnElement]:
    key = canonical_sort(sort_key)
    newest = Property.created_at.desc()
    price = getattr(Property, config.price_field)

    if relevance is not None and key in RELEVANCE_SORTS:
        order = [relevance.desc(), newest]
    elif key == "oldest":
        order = [Property.created_at.asc()]
    elif key == "price_low_to_high":
        order = [price.asc().nulls_last(), newest]
    elif key == "price_high_to_low":
        order = [price.desc().nulls_last(), newest]
    elif key == "featured":
        order = [Property.featured.desc(), newest]
    elif key == "popular":
        order = [Property.views.desc(), newest]
    else:
        order = [newest]

    order.append(Property.id.asc())
    return order
