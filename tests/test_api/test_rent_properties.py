"""Tests for /api/v1/properties/rent endpoints."""
import pytest
from httpx import AsyncClient

from tests.conftest import OWNER, insert_property, make_buy_payload, make_property_payload


@pytest.mark.asyncio
async def test_create_rent_property(client: AsyncClient):
    payload = make_property_payload(listingType=None)
    resp = await client.post("/api/v1/properties/rent", json=payload, headers=OWNER)
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["listingType"] == "rent"
    assert data["urlPath"].startswith("/rent/")


@pytest.mark.asyncio
async def test_create_rent_rejects_buy_type(client: AsyncClient):
    resp = await client.post("/api/v1/properties/rent", json=make_buy_payload(), headers=OWNER)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_pune_flat_search(client: AsyncClient, db_session):
    """city Pune, flats, 10k-30k, 2 or 3 bedrooms, cheapest first."""
    await insert_property(db_session, title="A", monthly_rent=30000, bedrooms=3, minutes=1)
    await insert_property(db_session, title="B", monthly_rent=12000, bedrooms=2, minutes=2)
    await insert_property(db_session, title="C", monthly_rent=12000, bedrooms=3, minutes=3)
    await insert_property(db_session, title="too cheap", monthly_rent=9000, bedrooms=2)
    await insert_property(db_session, title="too big", monthly_rent=15000, bedrooms=4)
    await insert_property(db_session, title="room", monthly_rent=15000, bedrooms=2, category="room")
    await insert_property(db_session, title="elsewhere", monthly_rent=15000, bedrooms=2, city="Nagpur")

    resp = await client.post(
        "/api/v1/properties/rent/search",
        json={
            "location": "Pune, Maharashtra",
            "category": "flat",
            "sort": "price_low_to_high",
            "filters": {"priceRange": {"min": 10000, "max": 30000}, "bedrooms": ["2", "3"]},
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    items = body["data"]["searchResultData"]

    # equal rents: newest first
    assert [i["title"] for i in items] == ["C", "B", "A"]
    for item in items:
        assert item["city"] == "Pune"
        assert item["category"] == "flat"
        assert 10000 <= item["monthlyRent"] <= 30000
        assert item["bedrooms"] in (2, 3)
    assert body["pagination"]["total"] == 3
    assert body["message"] == "Rent properties search completed successfully"


@pytest.mark.asyncio
async def test_cleared_max_price_is_unbounded(client: AsyncClient, db_session):
    await insert_property(db_session, monthly_rent=95000)
    resp = await client.post(
        "/api/v1/properties/rent/search",
        json={"filters": {"priceRange": {"min": 50000, "max": ""}}},
    )
    assert resp.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_five_plus_bedrooms(client: AsyncClient, db_session):
    for beds in (4, 5, 6):
        await insert_property(db_session, title=f"{beds}", bedrooms=beds)
    resp = await client.post("/api/v1/properties/rent/search", json={"filters": {"bedrooms": ["5+"]}})
    assert sorted(i["bedrooms"] for i in resp.json()["data"]["searchResultData"]) == [5, 6]


@pytest.mark.asyncio
async def test_amenities_superset(client: AsyncClient, db_session):
    await insert_property(db_session, title="full", amenities=["wifi", "parking", "lift"])
    await insert_property(db_session, title="partial", amenities=["wifi"])
    resp = await client.post(
        "/api/v1/properties/rent/search", json={"filters": {"amenities": ["parking", "wifi"]}}
    )
    items = resp.json()["data"]["searchResultData"]
    assert [i["title"] for i in items] == ["full"]
    assert {"wifi", "parking"} <= set(items[0]["amenities"])


@pytest.mark.asyncio
async def test_rent_search_excludes_buy_listings(client: AsyncClient, db_session):
    await insert_property(db_session, title="rent")
    await insert_property(db_session, title="legacy", listing_type=None)
    await insert_property(db_session, title="sale", listing_type="buy", monthly_rent=None, selling_price=4_000_000)

    resp = await client.post("/api/v1/properties/rent/search", json={})
    titles = sorted(i["title"] for i in resp.json()["data"]["searchResultData"])
    assert titles == ["legacy", "rent"]


@pytest.mark.asyncio
async def test_rent_search_ignores_possession_status(client: AsyncClient, db_session):
    await insert_property(db_session)
    resp = await client.post(
        "/api/v1/properties/rent/search", json={"filters": {"possessionStatus": "under-construction"}}
    )
    assert resp.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_preferred_tenants_filter(client: AsyncClient, db_session):
    await insert_property(db_session, title="family", preferred_tenants="family")
    await insert_property(db_session, title="bachelors", preferred_tenants="bachelors")
    resp = await client.get("/api/v1/properties/rent", params={"preferredTenants": "family"})
    assert [i["title"] for i in resp.json()["data"]["items"]] == ["family"]


@pytest.mark.asyncio
async def test_pagination_is_consistent(client: AsyncClient, db_session):
    for i in range(5):
        await insert_property(db_session, title=f"p{i}", minutes=i)

    async def titles(page: int, limit: int) -> list:
        resp = await client.post("/api/v1/properties/rent/search", json={"page": page, "limit": limit})
        body = resp.json()
        assert body["pagination"]["total"] == 5
        return [i["title"] for i in body["data"]["searchResultData"]]

    first, second, both = await titles(1, 2), await titles(2, 2), await titles(1, 4)
    assert first + second == both
    assert await titles(9, 2) == []


@pytest.mark.asyncio
async def test_bad_filter_values_never_fail(client: AsyncClient, db_session):
    await insert_property(db_session)
    resp = await client.post(
        "/api/v1/properties/rent/search",
        json={
            "page": "two",
            "limit": None,
            "sort": {"by": "price"},
            "filters": {"priceRange": {"min": "abc", "max": []}, "bedrooms": "x", "furnishing": 42},
        },
    )
    assert resp.status_code == 200
    assert resp.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_get_legacy_row_gets_rent_url(client: AsyncClient, db_session):
    prop = await insert_property(db_session, listing_type=None)
    resp = await client.get(f"/api/v1/properties/rent/{prop.slug}")
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["listingType"] == "rent"
    assert data["urlPath"] == f"/rent/{prop.slug}"


@pytest.mark.asyncio
async def test_get_buy_property_through_rent_endpoint(client: AsyncClient, db_session):
    prop = await insert_property(db_session, listing_type="buy", monthly_rent=None, selling_price=7_500_000)
    # the failed request rolls the shared session back and expires `prop`
    property_id, slug = prop.id, prop.slug

    resp = await client.get(f"/api/v1/properties/rent/{property_id}")
    assert resp.status_code == 404
    body = resp.json()
    assert body["message"] == "This property is listed for sale, not rent"
    assert body["data"] == {"listingType": "buy", "urlPath": f"/buy/{slug}"}


@pytest.mark.asyncio
async def test_get_missing_rent_property(client: AsyncClient):
    resp = await client.get("/api/v1/properties/rent/nothing-here")
    assert resp.status_code == 404
    assert resp.json()["data"] is None


@pytest.mark.asyncio
async def test_huge_page_returns_empty_window(client: AsyncClient, db_session):
    await insert_property(db_session)
    resp = await client.post("/api/v1/properties/rent/search", json={"page": 10**18, "limit": 100})
    assert resp.status_code == 200
    body = resp.json()
    assert body["data"]["searchResultData"] == []
    assert body["pagination"]["total"] == 1
    assert body["pagination"]["page"] == 10**18


@pytest.mark.asyncio
async def test_huge_page_on_query_string(client: AsyncClient, db_session):
    await insert_property(db_session)
    resp = await client.get("/api/v1/properties/rent", params={"page": str(10**30)})
    assert resp.status_code == 200
    assert resp.json()["data"]["items"] == []
