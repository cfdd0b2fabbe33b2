"""Search service — runs a normalized search and returns one page plus the total.

The page query and the count query share one clause list, so `total` always
describes the same match set the page was cut from. A page past the end is an
empty list, not an error.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import func, null, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.core.metrics import NullMetrics, QueryMetrics
from app.models.property_model import Property
from app.services.filter_normalizer import SearchCriteria
from app.services.listing_types import ListingTypeConfig
from app.services.query_builder import build_match_clauses, relevance_score
from app.services.sort_resolver import resolve_sort

logger = get_logger(__name__)


@dataclass
class SearchPage:
    rows: List[Tuple[Property, Optional[int]]]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total > 0 else 0


async def search_properties(
    db: AsyncSession,
    criteria: SearchCriteria,
    config: ListingTypeConfig,
    metrics: Optional[QueryMetrics] = None,
) -> SearchPage:
    metrics = metrics or NullMetrics()
    clauses = build_match_clauses(criteria, config)

    score = relevance_score(criteria.text) if criteria.text else None
    order_by = resolve_sort(criteria.sort, config, score)

    count_stmt = select(func.count()).select_from(
        select(Property.id).where(*clauses).subquery()
    )
    page_stmt = (
        select(Property, (score if score is not None else null()).label("relevance_score"))
        .where(*clauses)
        .order_by(*order_by)
        .offset(criteria.offset)
        .limit(criteria.page_size)
    )

    async with metrics.track(f"search.{config.key}"):
        total: int = (await db.execute(count_stmt)).scalar_one()
        # a window past the end is empty; the offset may not even fit a BIGINT
        rows = (await db.execute(page_stmt)).all() if criteria.offset < total else []

    logger.debug(
        "Search returned %d of %d",
        len(rows),
        total,
        extra={"listing_type": config.key, "total": total, "page": criteria.page},
    )

    return SearchPage(
        rows=[(row[0], row[1]) for row in rows],
        total=total,
        page=criteria.page,
        page_size=criteria.page_size,
    )
