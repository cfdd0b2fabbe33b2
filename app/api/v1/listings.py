"""Listing routers — create, list, search and single lookup per listing type.
/api/v1/properties, /api/v1/properties/rent, /api/v1/properties/buy

The three routers are the same code parametrized by a ListingTypeConfig.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequireCaller, get_db, get_metrics
from app.api.responses import listing_page, ok, search_result
from app.core.identity import CallerIdentity
from app.core.metrics import QueryMetrics
from app.schemas.base_schema import ApiResponse, Meta
from app.schemas.property_schema import PropertyCreate, PropertyDetailRead, PropertyListPage
from app.schemas.search_schema import SearchRequest, SearchResultData
from app.services.filter_normalizer import normalize_query_params, normalize_search_request
from app.services.listing_types import ListingTypeConfig
from app.services.property_service import create_property, find_listing, increment_views, to_detail
from app.services.search_service import search_properties


def _query_dict(request: Request) -> Dict[str, Any]:
    """Query params as a dict; repeated keys (bedrooms=2&bedrooms=3) become lists."""
    params = request.query_params
    result: Dict[str, Any] = {}
    for key in params.keys():
        values = params.getlist(key)
        result[key] = values if len(values) > 1 else values[0]
    return result


def build_listing_router(config: ListingTypeConfig) -> APIRouter:
    router = APIRouter()

    @router.post("", response_model=ApiResponse[PropertyDetailRead], status_code=201)
    async def create_listing(
        payload: PropertyCreate,
        request: Request,
        db: AsyncSession = Depends(get_db),
        caller: CallerIdentity = RequireCaller,
    ):
        """Create a listing owned by the caller."""
        prop = await create_property(db, payload, caller, listing_type=config.listing_type)
        return ok(to_detail(prop), "Property created successfully", request)

    @router.get("", response_model=ApiResponse[PropertyListPage])
    async def list_listings(
        request: Request,
        db: AsyncSession = Depends(get_db),
        metrics: QueryMetrics = Depends(get_metrics),
    ):
        """List active listings.

        Query params: q, city, category, propertyType, min/max price
        (minRent/maxRent or minPrice/maxPrice), bedrooms, furnishing,
        amenities (comma separated), the listing type's own filters
        (preferredTenants | possessionStatus, loanAvailable), ownerId,
        sort, page, limit. Unusable values are ignored.
        """
        criteria = normalize_query_params(_query_dict(request), config)
        page = await search_properties(db, criteria, config, metrics)
        return ok(
            listing_page(page),
            f"{config.label} listed successfully",
            request,
            meta=Meta(page=page.page, page_size=page.page_size, total=page.total),
        )

    @router.post("/search", response_model=ApiResponse[SearchResultData])
    async def search_listings(
        request: Request,
        payload: Optional[SearchRequest] = None,
        db: AsyncSession = Depends(get_db),
        metrics: QueryMetrics = Depends(get_metrics),
    ):
        """Filtered search with relevance ranking when a text query is given."""
        raw = payload.model_dump(by_alias=True) if payload else {}
        criteria = normalize_search_request(raw, config)
        page = await search_properties(db, criteria, config, metrics)
        data, pagination = search_result(page, f"{config.label} search completed successfully")
        return ok(data, data.message, request, pagination=pagination)

    @router.get("/{identifier}", response_model=ApiResponse[PropertyDetailRead])
    async def get_listing(
        identifier: str,
        request: Request,
        db: AsyncSession = Depends(get_db),
        metrics: QueryMetrics = Depends(get_metrics),
    ):
        """Get one listing by id or slug."""
        async with metrics.track(f"lookup.{config.key}"):
            prop = await find_listing(db, identifier, config)
            await increment_views(db, prop)
        return ok(to_detail(prop), "Property retrieved successfully", request)

    return router
