"""Tests for /api/v1/properties/favorites endpoints."""
import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from app.models import PropertyFavorite
from tests.conftest import ADMIN, OTHER_USER, OWNER, insert_property

FAVORITES = "/api/v1/properties/favorites"


async def _count(client: AsyncClient, property_id) -> int:
    resp = await client.get(f"/api/v1/properties/{property_id}")
    return resp.json()["data"]["favoritesCount"]


@pytest.mark.asyncio
async def test_add_favorite(client: AsyncClient, db_session):
    prop = await insert_property(db_session)
    property_id = str(prop.id)

    resp = await client.post(f"{FAVORITES}/{property_id}", headers=OTHER_USER)
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Added to favorites"
    assert body["data"] == {"propertyId": property_id, "favorited": True, "favoritesCount": 1}
    assert await _count(client, property_id) == 1


@pytest.mark.asyncio
async def test_second_add_is_idempotent(client: AsyncClient, db_session):
    prop = await insert_property(db_session)
    property_id = str(prop.id)

    assert (await client.post(f"{FAVORITES}/{property_id}", headers=OTHER_USER)).status_code == 201
    again = await client.post(f"{FAVORITES}/{property_id}", headers=OTHER_USER)
    assert again.status_code == 200
    assert again.json()["message"] == "Already favorited"
    assert again.json()["data"]["favoritesCount"] == 1

    rows = (await db_session.execute(select(func.count()).select_from(PropertyFavorite))).scalar_one()
    assert rows == 1


@pytest.mark.asyncio
async def test_counter_tracks_distinct_users(client: AsyncClient, db_session):
    prop = await insert_property(db_session)
    property_id = str(prop.id)

    for headers in (OWNER, OTHER_USER, ADMIN):
        assert (await client.post(f"{FAVORITES}/{property_id}", headers=headers)).status_code == 201
    assert await _count(client, property_id) == 3

    resp = await client.delete(f"{FAVORITES}/{property_id}", headers=OWNER)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"propertyId": property_id, "favorited": False, "favoritesCount": 2}


@pytest.mark.asyncio
async def test_remove_without_favorite_leaves_counter(client: AsyncClient, db_session):
    prop = await insert_property(db_session, favorites_count=4)
    property_id = str(prop.id)

    resp = await client.delete(f"{FAVORITES}/{property_id}", headers=OTHER_USER)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Not in favorites"
    assert resp.json()["data"]["favoritesCount"] == 4


@pytest.mark.asyncio
async def test_counter_never_goes_negative(client: AsyncClient, db_session):
    prop = await insert_property(db_session)
    property_id = prop.id
    # a favorite row whose increment was lost
    db_session.add(PropertyFavorite(user_id="someone-else", property_id=property_id))
    await db_session.commit()

    resp = await client.delete(f"{FAVORITES}/{property_id}", headers=OTHER_USER)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Removed from favorites"
    assert resp.json()["data"]["favoritesCount"] == 0


@pytest.mark.asyncio
async def test_favorites_require_identity(client: AsyncClient, db_session):
    prop = await insert_property(db_session)
    property_id = str(prop.id)

    assert (await client.post(f"{FAVORITES}/{property_id}")).status_code == 401
    assert (await client.delete(f"{FAVORITES}/{property_id}")).status_code == 401
    assert (await client.get(FAVORITES)).status_code == 401


@pytest.mark.asyncio
async def test_add_unknown_or_deleted_property(client: AsyncClient, db_session):
    deleted = await insert_property(db_session, is_deleted=True)
    deleted_id = str(deleted.id)

    assert (await client.post(f"{FAVORITES}/{uuid.uuid4()}", headers=OWNER)).status_code == 404
    assert (await client.post(f"{FAVORITES}/{deleted_id}", headers=OWNER)).status_code == 404
    assert (await client.post(f"{FAVORITES}/not-a-uuid", headers=OWNER)).status_code == 400


@pytest.mark.asyncio
async def test_list_newest_favorite_first(client: AsyncClient, db_session):
    first = await insert_property(db_session, title="first", minutes=5)
    second = await insert_property(db_session, title="second", minutes=1)
    gone = await insert_property(db_session, title="gone")
    ids = [str(first.id), str(gone.id), str(second.id)]

    for property_id in ids:
        assert (await client.post(f"{FAVORITES}/{property_id}", headers=OTHER_USER)).status_code == 201
    await client.delete(f"/api/v1/properties/{ids[1]}", headers=OWNER)

    resp = await client.get(FAVORITES, headers=OTHER_USER)
    assert resp.status_code == 200
    assert [i["title"] for i in resp.json()["data"]["items"]] == ["second", "first"]

    mine = await client.get(FAVORITES, headers=OWNER)
    assert mine.json()["data"]["items"] == []


@pytest.mark.asyncio
async def test_hard_delete_drops_favorites(client: AsyncClient, db_session):
    prop = await insert_property(db_session)
    property_id = str(prop.id)
    await client.post(f"{FAVORITES}/{property_id}", headers=OTHER_USER)

    resp = await client.delete(f"/api/v1/properties/{property_id}", params={"hard": "true"}, headers=ADMIN)
    assert resp.status_code == 200

    rows = (await db_session.execute(select(func.count()).select_from(PropertyFavorite))).scalar_one()
    assert rows == 0
    assert (await client.get(FAVORITES, headers=OTHER_USER)).json()["data"]["items"] == []
