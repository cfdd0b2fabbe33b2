"""API dependencies — database session, caller identity, and metrics.

Authentication itself happens upstream: the gateway verifies the user and
forwards the identity as `X-User-Id` / `X-User-Role` headers. Read endpoints
ignore them; mutations require `X-User-Id`.
"""
from typing import AsyncGenerator, Annotated, Optional

from fastapi import Depends, Request, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import UnauthorizedError
from app.core.identity import CallerIdentity
from app.core.metrics import NullMetrics, QueryMetrics
from app.database import async_session_factory


# ---------------------------------------------------------------------------
# Database session dependency
# ---------------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session for request scope."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ---------------------------------------------------------------------------
# Caller identity
# ---------------------------------------------------------------------------

_user_id_header = APIKeyHeader(
    name="X-User-Id",
    auto_error=False,
    description="Verified user id forwarded by the auth gateway",
)
_user_role_header = APIKeyHeader(
    name="X-User-Role",
    auto_error=False,
    description="Role of the caller ('admin' for moderators)",
)


async def get_caller(
    user_id: Annotated[str | None, Security(_user_id_header)],
    role: Annotated[str | None, Security(_user_role_header)],
) -> Optional[CallerIdentity]:
    if not user_id or not user_id.strip():
        return None
    return CallerIdentity(user_id=user_id.strip(), role=(role or "").strip().lower() or None)


async def require_caller(
    caller: Annotated[Optional[CallerIdentity], Depends(get_caller)],
) -> CallerIdentity:
    """Raises UnauthorizedError (401) when no identity was forwarded."""
    if caller is None:
        raise UnauthorizedError("Authentication required: missing X-User-Id header")
    return caller


RequireCaller = Depends(require_caller)


# ---------------------------------------------------------------------------
# Metrics collector
# ---------------------------------------------------------------------------

def get_metrics(request: Request) -> QueryMetrics:
    """The application's collector; NullMetrics if none was installed."""
    return getattr(request.app.state, "metrics", None) or NullMetrics()
