"""Property management endpoints — related listings, edits, status and deletion.
/api/v1/properties
"""
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequireCaller, get_db
from app.api.responses import ok
from app.config import settings
from app.core.exceptions import ForbiddenError
from app.core.identity import CallerIdentity
from app.schemas.base_schema import ApiResponse
from app.schemas.property_schema import (
    AdminStatusAction,
    PropertyDetailRead,
    PropertyRead,
    PropertyUpdate,
    RelatedProperties,
    StatusUpdate,
)
from app.services.property_service import (
    get_property_for_update,
    hard_delete,
    moderate,
    related_properties,
    soft_delete,
    to_detail,
    update_property,
    update_status,
)

router = APIRouter()


@router.get("/related/{identifier}", response_model=ApiResponse[RelatedProperties])
async def get_related(
    identifier: str,
    request: Request,
    limit: int = Query(settings.related_limit, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    """Similar active listings: same city, category and listing type, price within ±25%."""
    items = await related_properties(db, identifier, limit)
    return ok(
        RelatedProperties(items=[PropertyRead.model_validate(p) for p in items]),
        "Related properties retrieved successfully",
        request,
    )


@router.patch("/admin/{property_id}/status", response_model=ApiResponse[PropertyDetailRead])
async def admin_set_status(
    property_id: str,
    payload: AdminStatusAction,
    request: Request,
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = RequireCaller,
):
    """Moderate a listing (approve, reject, block, unblock). Admin only."""
    if not caller.is_admin:
        raise ForbiddenError("Admin access required")
    prop = await get_property_for_update(db, property_id, caller)
    prop = await moderate(db, prop, payload.action)
    return ok(to_detail(prop), f"Property {payload.action} action applied", request)


@router.patch("/{property_id}", response_model=ApiResponse[PropertyDetailRead])
async def patch_property(
    property_id: str,
    payload: PropertyUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = RequireCaller,
):
    """Partial update by the owner or an admin."""
    prop = await get_property_for_update(db, property_id, caller)
    prop = await update_property(db, prop, payload)
    return ok(to_detail(prop), "Property updated successfully", request)


@router.patch("/{property_id}/status", response_model=ApiResponse[PropertyDetailRead])
async def patch_status(
    property_id: str,
    payload: StatusUpdate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = RequireCaller,
):
    prop = await get_property_for_update(db, property_id, caller, allow_admin=False)
    prop = await update_status(db, prop, payload.status)
    return ok(to_detail(prop), f"Property marked as {payload.status}", request)


@router.delete("/{property_id}", response_model=ApiResponse[dict])
async def delete_property(
    property_id: str,
    request: Request,
    hard: bool = Query(False, description="Remove the row permanently (admin only)"),
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = RequireCaller,
):
    """Soft delete by owner or admin; `?hard=true` deletes the row (admin only)."""
    if hard and not caller.is_admin:
        raise ForbiddenError("Admin access required for permanent deletion")
    prop = await get_property_for_update(db, property_id, caller, include_deleted=hard)
    if hard:
        await hard_delete(db, prop)
        return ok({"id": property_id}, "Property deleted permanently", request)
    await soft_delete(db, prop)
    return ok({"id": property_id}, "Property deleted successfully", request)
