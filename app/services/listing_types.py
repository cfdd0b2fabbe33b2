"""Listing-type strategies for the search pipeline.

One `ListingTypeConfig` per endpoint family. The query builder, sort resolver
and lookup service read everything listing-specific from here: which price
column to range over, which extra exact-match filters are allowed, and whether
rows without a listing type (pre-migration data, treated as rent) match.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from app.config import settings
from app.core.constants import LISTING_BUY, LISTING_RENT


@dataclass(frozen=True)
class ListingTypeConfig:
    key: str
    listing_type: Optional[str]
    price_field: str
    price_ceiling: float
    extra_filters: Tuple[str, ...] = ()
    include_legacy: bool = False
    min_price_param: str = "minPrice"
    max_price_param: str = "maxPrice"
    label: str = "Properties"

    @property
    def other_listing_type(self) -> Optional[str]:
        if self.listing_type == LISTING_RENT:
            return LISTING_BUY
        if self.listing_type == LISTING_BUY:
            return LISTING_RENT
        return None


RENT = ListingTypeConfig(
    key="rent",
    listing_type=LISTING_RENT,
    price_field="monthly_rent",
    price_ceiling=settings.rent_price_ceiling,
    extra_filters=("preferred_tenants",),
    include_legacy=True,
    min_price_param="minRent",
    max_price_param="maxRent",
    label="Rent properties",
)

BUY = ListingTypeConfig(
    key="buy",
    listing_type=LISTING_BUY,
    price_field="selling_price",
    price_ceiling=settings.buy_price_ceiling,
    extra_filters=("possession_status", "loan_available"),
    label="Buy properties",
)

# Unscoped listing/search: no listing-type constraint, prices ranged on rent
ALL = ListingTypeConfig(
    key="all",
    listing_type=None,
    price_field="monthly_rent",
    price_ceiling=settings.rent_price_ceiling,
    min_price_param="minRent",
    max_price_param="maxRent",
)

PRICE_FIELDS = {
    LISTING_RENT: RENT.price_field,
    LISTING_BUY: BUY.price_field,
}


def config_for(listing_type: Optional[str]) -> ListingTypeConfig:
    """Config matching a stored listing type (missing = rent)."""
    return BUY if listing_type == LISTING_BUY else RENT
