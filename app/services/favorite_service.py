"""Favorite service — per-user favorites and the property's favorites counter.

`favorites_count` moves through a single UPDATE (count ± 1), like views. The
unique (user, property) pair makes a repeated add a no-op.
"""
import uuid
from typing import List

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DuplicateError, NotFoundError, ValidationError
from app.core.identity import CallerIdentity
from app.core.logging import get_logger
from app.models.property_model import Property, PropertyFavorite
from app.services.property_service import parse_uuid

logger = get_logger(__name__)


def _require_id(property_id: str) -> uuid.UUID:
    pid = parse_uuid(property_id)
    if pid is None:
        raise ValidationError("Invalid property id", detail={"field": "propertyId"})
    return pid


async def _favorite_exists(db: AsyncSession, user_id: str, pid: uuid.UUID) -> bool:
    found = await db.execute(
        select(PropertyFavorite.id).where(
            PropertyFavorite.user_id == user_id,
            PropertyFavorite.property_id == pid,
        )
    )
    return found.first() is not None


async def favorites_count(db: AsyncSession, pid: uuid.UUID) -> int:
    count = (await db.execute(
        select(Property.favorites_count).where(Property.id == pid)
    )).scalar_one_or_none()
    return count or 0


async def add_favorite(db: AsyncSession, property_id: str, caller: CallerIdentity) -> bool:
    """Mark a property as a favorite. Returns False when it already was one."""
    pid = _require_id(property_id)
    exists = (await db.execute(
        select(Property.id).where(Property.id == pid, Property.is_deleted.is_(False))
    )).first()
    if exists is None:
        raise NotFoundError(f"Property '{property_id}' not found")

    if await _favorite_exists(db, caller.user_id, pid):
        return False

    db.add(PropertyFavorite(user_id=caller.user_id, property_id=pid))
    try:
        await db.flush()
    except IntegrityError as e:
        # a concurrent add won the unique pair
        raise DuplicateError("Already favorited") from e

    await db.execute(
        update(Property)
        .where(Property.id == pid)
        .values(favorites_count=Property.favorites_count + 1, updated_at=Property.updated_at)
    )
    logger.info(
        "Favorite added",
        extra={"property_id": str(pid), "operation": "favorite.add"},
    )
    return True


async def remove_favorite(db: AsyncSession, property_id: str, caller: CallerIdentity) -> bool:
    """Drop the caller's favorite. Returns False when there was nothing to drop."""
    pid = _require_id(property_id)
    result = await db.execute(
        delete(PropertyFavorite).where(
            PropertyFavorite.user_id == caller.user_id,
            PropertyFavorite.property_id == pid,
        )
    )
    if not result.rowcount:
        return False

    await db.execute(
        update(Property)
        .where(Property.id == pid, Property.favorites_count > 0)
        .values(favorites_count=Property.favorites_count - 1, updated_at=Property.updated_at)
    )
    logger.info(
        "Favorite removed",
        extra={"property_id": str(pid), "operation": "favorite.remove"},
    )
    return True


async def list_favorites(db: AsyncSession, caller: CallerIdentity) -> List[Property]:
    """The caller's favorites, most recently added first; deleted listings are skipped."""
    result = await db.execute(
        select(Property)
        .join(PropertyFavorite, PropertyFavorite.property_id == Property.id)
        .where(PropertyFavorite.user_id == caller.user_id, Property.is_deleted.is_(False))
        .order_by(PropertyFavorite.created_at.desc(), PropertyFavorite.id.desc())
    )
    return list(result.scalars().all())
