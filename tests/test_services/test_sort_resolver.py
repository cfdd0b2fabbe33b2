"""Tests for sort key mapping."""
import pytest
from sqlalchemy import literal

from app.services.listing_types import BUY, RENT
from app.services.sort_resolver import canonical_sort, resolve_sort


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("rent_low_to_high", "price_low_to_high"),
        ("PRICE_HIGH", "price_high_to_low"),
        (" featured ", "featured"),
        ("popular", "popular"),
        ("bogus", "newest"),
        (None, "newest"),
        (3, "newest"),
    ],
)
def test_canonical_sort(raw, expected):
    assert canonical_sort(raw) == expected


def _sql(clauses) -> list:
    return [str(c) for c in clauses]


def test_newest_ends_with_id_tiebreak():
    assert _sql(resolve_sort("newest", RENT)) == [
        "properties.created_at DESC",
        "properties.id ASC",
    ]


def test_price_sort_uses_listing_type_price_column():
    rent = _sql(resolve_sort("price_low_to_high", RENT))
    buy = _sql(resolve_sort("price_high_to_low", BUY))
    assert rent[0].startswith("properties.monthly_rent ASC")
    assert buy[0].startswith("properties.selling_price DESC")
    assert rent[1] == "properties.created_at DESC"


def test_relevance_replaces_newest_only():
    score = literal(1)
    assert len(resolve_sort("newest", RENT, score)) == 3
    assert _sql(resolve_sort("relevance", RENT, score))[1] == "properties.created_at DESC"
    # explicit price order wins over relevance
    assert _sql(resolve_sort("price_low_to_high", RENT, score))[0].startswith("properties.monthly_rent")


def test_oldest():
    assert _sql(resolve_sort("oldest", RENT))[0] == "properties.created_at ASC"
