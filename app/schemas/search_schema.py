"""Pydantic schemas for POST /api/v1/properties[/rent|/buy]/search

The request model is deliberately loose: every field is `Any` so a malformed
value never turns into a 4xx. Coercion happens in the filter normalizer.
"""
from typing import Any, List

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from app.schemas.base_schema import CamelModel
from app.schemas.property_schema import PropertySearchItem


class SearchRequest(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    q: Any = None
    query: Any = None
    search_query: Any = None

    location: Any = None
    city: Any = None
    category: Any = None
    property_type: Any = None
    type: Any = None

    page: Any = None
    limit: Any = None
    sort: Any = None

    filters: Any = None


class SearchResultData(CamelModel):
    search_result_data: List[PropertySearchItem]
    message: str
