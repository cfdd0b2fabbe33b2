"""Favorites endpoints — the caller's wishlist.
/api/v1/properties/favorites
"""
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequireCaller, get_db
from app.api.responses import ok
from app.core.identity import CallerIdentity
from app.schemas.base_schema import ApiResponse
from app.schemas.property_schema import FavoriteProperties, FavoriteStatus, PropertyRead
from app.services.favorite_service import (
    add_favorite,
    favorites_count,
    list_favorites,
    remove_favorite,
)
from app.services.property_service import parse_uuid

router = APIRouter()


@router.get("", response_model=ApiResponse[FavoriteProperties])
async def get_favorites(
    request: Request,
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = RequireCaller,
):
    items = await list_favorites(db, caller)
    return ok(
        FavoriteProperties(items=[PropertyRead.model_validate(p) for p in items]),
        "Favorites retrieved successfully",
        request,
    )


@router.post("/{property_id}", response_model=ApiResponse[FavoriteStatus], status_code=201)
async def post_favorite(
    property_id: str,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = RequireCaller,
):
    """Add a favorite. Repeating the call answers 200 and changes nothing."""
    added = await add_favorite(db, property_id, caller)
    pid = parse_uuid(property_id)
    state = FavoriteStatus(property_id=pid, favorited=True, favorites_count=await favorites_count(db, pid))
    if not added:
        response.status_code = 200
        return ok(state, "Already favorited", request)
    return ok(state, "Added to favorites", request)


@router.delete("/{property_id}", response_model=ApiResponse[FavoriteStatus])
async def delete_favorite(
    property_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = RequireCaller,
):
    removed = await remove_favorite(db, property_id, caller)
    pid = parse_uuid(property_id)
    state = FavoriteStatus(property_id=pid, favorited=False, favorites_count=await favorites_count(db, pid))
    return ok(state, "Removed from favorites" if removed else "Not in favorites", request)
