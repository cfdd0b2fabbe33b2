# app/api/responses.py
from typing import Any, List, Optional, Tuple

from fastapi import Request

from app.models.property_model import Property
from app.schemas.base_schema import ApiResponse, Meta, Pagination
from app.schemas.property_schema import PropertyListPage, PropertySearchItem
from app.schemas.search_schema import SearchResultData
from app.services.search_service import SearchPage


def ok(
    data: Any,
    message: str,
    request: Optional[Request] = None,
    meta: Optional[Meta] = None,
    pagination: Optional[Pagination] = None,
) -> ApiResponse:
    """Wrap a successful response in the standard ApiResponse envelope."""
    return ApiResponse(
        success=True,
        data=data,
        meta=meta,
        pagination=pagination,
        message=message,
        errors=None,
        trace_id=getattr(request.state, "trace_id", "") if request else "",
    )


def error(
    message: str,
    request: Optional[Request] = None,
    errors: Optional[list] = None,
    data: Any = None,
) -> dict:
    """Serialized failure envelope for exception handlers."""
    return ApiResponse(
        success=False,
        data=data,
        message=message,
        errors=errors if errors is not None else [message],
        trace_id=getattr(request.state, "trace_id", "") if request else "",
    ).model_dump(by_alias=True, mode="json")


def search_items(rows: List[Tuple[Property, Optional[int]]]) -> List[PropertySearchItem]:
    items = []
    for prop, score in rows:
        item = PropertySearchItem.model_validate(prop)
        item.relevance_score = score
        items.append(item)
    return items


def listing_page(page: SearchPage) -> PropertyListPage:
    return PropertyListPage(
        items=search_items(page.rows),
        total=page.total,
        page=page.page,
        page_size=page.page_size,
    )


def search_result(page: SearchPage, message: str) -> Tuple[SearchResultData, Pagination]:
    return (
        SearchResultData(search_result_data=search_items(page.rows), message=message),
        Pagination(
            total=page.total,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
        ),
    )
