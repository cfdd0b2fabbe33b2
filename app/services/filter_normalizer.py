"""Filter normalizer — turns loosely-typed client filters into `SearchCriteria`.

The normalizer is permissive on purpose: an unusable value (non-numeric
price, unknown furnishing, bedroom "abc") is dropped and the rest of the
request still runs. It never raises for bad filter input.

Accepted request shape (POST search body, camelCase):

    {q | query | searchQuery, location | city, category, propertyType | type,
     page, limit, sort,
     filters: {city, propertyType, category, priceRange: {min, max},
               bedrooms: ["1".."4", "5+"], amenities: [...], furnishing: [...],
               preferredTenants, possessionStatus, loanAvailable, ownerId}}

GET listings are mapped onto the same shape by `normalize_query_params`.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic.alias_generators import to_camel

from app.config import settings
from app.core.constants import BEDROOMS_OPEN_ENDED, CATEGORIES, FURNISHING_OPTIONS
from app.services.listing_types import ListingTypeConfig
from app.services.sort_resolver import canonical_sort


@dataclass
class PriceRange:
    min: float
    max: float


@dataclass
class SearchCriteria:
    """Canonical filter descriptor consumed by the query builder."""
    text: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    property_type: Optional[str] = None
    price_range: Optional[PriceRange] = None
    bedrooms: List[int] = field(default_factory=list)
    bedrooms_open_ended: bool = False
    amenities: List[str] = field(default_factory=list)
    furnishing: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    owner_id: Optional[str] = None
    sort: str = "newest"
    page: int = 1
    page_size: int = settings.default_page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


# ---------------------------------------------------------------------------
# Scalar coercion
# ---------------------------------------------------------------------------

def clean_str(value: Any) -> Optional[str]:
    """Trimmed string, or None for empty/unusable input."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip().replace(",", ""))
        else:
            return None
    except (ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_int(value: Any) -> Optional[int]:
    number = to_number(value)
    return int(number) if number is not None else None


def to_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
    return None


def as_list(value: Any) -> List[Any]:
    """Lists pass through; strings are split on commas; scalars are wrapped."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, str):
        return [part for part in value.split(",")]
    return [value]


def dedupe(values: Iterable[Any]) -> List[Any]:
    seen = set()
    result = []
    for v in values:
        if v not in seen:
            seen.add(v)
            result.append(v)
    return result


# ---------------------------------------------------------------------------
# Field normalizers
# ---------------------------------------------------------------------------

def normalize_price_range(raw: Any, ceiling: float) -> Optional[PriceRange]:
    """Both bounds are always populated; cleared or garbage bounds fall back to
    the defaults (0 and `ceiling`), which the query builder treats as open."""
    if not isinstance(raw, Mapping):
        return None

    low = to_number(raw.get("min"))
    high = to_number(raw.get("max"))

    if low is None or low < 0:
        low = 0.0
    if high is None or high <= 0 or high > ceiling:
        high = float(ceiling)
    return PriceRange(min=low, max=high)


def normalize_bedrooms(raw: Any) -> tuple[List[int], bool]:
    """Returns (exact counts, open-ended flag). "5+" and anything >= 5 mean >= 5."""
    exact: List[int] = []
    open_ended = False
    for item in as_list(raw):
        text = clean_str(item)
        if text is None:
            continue
        if text.endswith("+"):
            text = text[:-1]
            count = to_int(text)
            if count is not None and count >= BEDROOMS_OPEN_ENDED:
                open_ended = True
            continue
        count = to_int(text)
        if count is None or count < 0:
            continue
        if count >= BEDROOMS_OPEN_ENDED:
            open_ended = True
        else:
            exact.append(count)
    return dedupe(exact), open_ended


def normalize_strings(raw: Any) -> List[str]:
    return dedupe(s for s in (clean_str(v) for v in as_list(raw)) if s)


def normalize_furnishing(raw: Any) -> List[str]:
    return [f for f in (s.lower() for s in normalize_strings(raw)) if f in FURNISHING_OPTIONS]


def normalize_category(raw: Any) -> Optional[str]:
    category = clean_str(raw)
    if category is None:
        return None
    category = category.lower()
    return category if category in CATEGORIES else None


def normalize_location(raw: Any) -> Optional[str]:
    """"Pune, Maharashtra" -> "Pune"."""
    location = clean_str(raw)
    if location is None:
        return None
    return clean_str(location.split(",")[0])


def normalize_paging(page: Any, limit: Any) -> tuple[int, int]:
    page_num = to_int(page)
    if page_num is None or page_num < 1:
        page_num = 1

    size = to_int(limit)
    if size is None:
        size = settings.default_page_size
    size = max(1, min(settings.max_page_size, size))
    return page_num, size


def _first(*values: Any) -> Optional[str]:
    for v in values:
        text = clean_str(v)
        if text:
            return text
    return None


def _filter_value(filters: Mapping, key: str) -> Any:
    """Read a filter by its camelCase name, falling back to snake_case."""
    camel = to_camel(key)
    if camel in filters:
        return filters[camel]
    return filters.get(key)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def normalize_search_request(raw: Mapping[str, Any], config: ListingTypeConfig) -> SearchCriteria:
    """Normalize a search body (camelCase keys) for one listing-type config."""
    if not isinstance(raw, Mapping):
        raw = {}
    filters = raw.get("filters")
    if not isinstance(filters, Mapping):
        filters = {}

    page, page_size = normalize_paging(raw.get("page"), raw.get("limit"))
    bedrooms, open_ended = normalize_bedrooms(filters.get("bedrooms"))

    criteria = SearchCriteria(
        text=_first(raw.get("q"), raw.get("query"), raw.get("searchQuery")),
        location=normalize_location(_first(raw.get("location"), raw.get("city"), filters.get("city"))),
        category=normalize_category(_first(raw.get("category"), filters.get("category"))),
        property_type=_first(raw.get("propertyType"), raw.get("type"), filters.get("propertyType")),
        price_range=normalize_price_range(filters.get("priceRange"), config.price_ceiling),
        bedrooms=bedrooms,
        bedrooms_open_ended=open_ended,
        amenities=normalize_strings(filters.get("amenities")),
        furnishing=normalize_furnishing(filters.get("furnishing")),
        owner_id=clean_str(filters.get("ownerId")),
        sort=canonical_sort(raw.get("sort")),
        page=page,
        page_size=page_size,
    )

    # only the config's own extra filters are read, so a rent search can never
    # pick up possessionStatus and a buy search never preferredTenants
    for key in config.extra_filters:
        value = _filter_value(filters, key)
        if key == "loan_available":
            value = to_bool(value)
        else:
            value = clean_str(value)
        if value is not None:
            criteria.extra[key] = value

    return criteria


def normalize_query_params(params: Mapping[str, Any], config: ListingTypeConfig) -> SearchCriteria:
    """Map GET query-string filters onto the search body shape and normalize."""
    min_price = params.get(config.min_price_param)
    max_price = params.get(config.max_price_param)

    filters: Dict[str, Any] = {
        "bedrooms": params.get("bedrooms"),
        "amenities": params.get("amenities"),
        "furnishing": params.get("furnishing") or params.get("furnished"),
        "ownerId": params.get("ownerId"),
    }
    if min_price is not None or max_price is not None:
        filters["priceRange"] = {"min": min_price, "max": max_price}
    for key in config.extra_filters:
        filters[to_camel(key)] = params.get(to_camel(key))

    raw = {
        "q": params.get("q"),
        "location": params.get("city") or params.get("location"),
        "category": params.get("category"),
        "propertyType": params.get("propertyType"),
        "page": params.get("page"),
        "limit": params.get("limit"),
        "sort": params.get("sort"),
        "filters": filters,
    }
    return normalize_search_request(raw, config)
