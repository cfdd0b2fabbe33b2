"""FastAPI application factory and startup configuration.

Routers for /rent and /buy are mounted before the generic router so that
`/api/v1/properties/rent` is never captured by `/{identifier}`.
"""
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.exceptions import (
    DuplicateError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from app.core.logging import get_logger, set_trace_id, setup_logging
from app.core.metrics import NullMetrics, QueryMetrics
from app.api.v1.favorites import router as favorites_router
from app.api.v1.listings import build_listing_router
from app.api.v1.properties import router as properties_router
from app.api.responses import error, ok
from app.services.listing_types import ALL, BUY, RENT

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    setup_logging()
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)

    if settings.auto_create_tables:
        from app.database import Base, engine

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    yield

    logger.info("Shutting down %s", settings.app_name)


def _validation_messages(exc: RequestValidationError) -> list:
    messages = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc)
        messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
    return messages


def create_app(metrics: QueryMetrics | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Property listings API — search, filter and manage rent and sale listings.",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    if metrics is None:
        metrics = QueryMetrics(settings.slow_query_threshold_ms) if settings.enable_query_metrics else NullMetrics()
    application.state.metrics = metrics

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.middleware("http")
    async def add_trace_id(request: Request, call_next):
        request.state.trace_id = set_trace_id(str(uuid4()))
        response = await call_next(request)
        response.headers["X-Trace-Id"] = request.state.trace_id
        return response

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        trace_id = getattr(request.state, "trace_id", None)
        logger.exception("Unhandled exception [trace_id=%s]", trace_id, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=error("Internal server error", request),
        )

    @application.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        # WrongListingTypeError lands here too; its detail tells the client where to go
        data = None
        if isinstance(exc.detail, dict):
            data = {
                "listingType": exc.detail.get("listing_type"),
                "urlPath": exc.detail.get("url_path"),
            }
        return JSONResponse(status_code=404, content=error(exc.message, request, data=data))

    @application.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content=error(exc.message, request, data=exc.detail))

    @application.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        messages = _validation_messages(exc)
        return JSONResponse(
            status_code=400,
            content=error(messages[0] if messages else "Invalid request", request, errors=messages),
        )

    @application.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError):
        return JSONResponse(status_code=401, content=error(exc.message, request))

    @application.exception_handler(ForbiddenError)
    async def forbidden_handler(request: Request, exc: ForbiddenError):
        return JSONResponse(status_code=403, content=error(exc.message, request))

    @application.exception_handler(DuplicateError)
    async def duplicate_handler(request: Request, exc: DuplicateError):
        return JSONResponse(status_code=409, content=error(exc.message, request))

    application.include_router(build_listing_router(RENT), prefix="/api/v1/properties/rent", tags=["rent"])
    application.include_router(build_listing_router(BUY), prefix="/api/v1/properties/buy", tags=["buy"])
    application.include_router(favorites_router, prefix="/api/v1/properties/favorites", tags=["favorites"])
    application.include_router(properties_router, prefix="/api/v1/properties", tags=["properties"])
    application.include_router(build_listing_router(ALL), prefix="/api/v1/properties", tags=["properties"])

    @application.get("/health", tags=["system"])
    async def health_check(request: Request):
        from sqlalchemy import text
        from app.database import async_session_factory

        db_status = "ok"
        try:
            async with async_session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            db_status = f"error: {str(e)}"

        return ok(
            {
                "status": "healthy" if db_status == "ok" else "unhealthy",
                "version": settings.app_version,
                "database": db_status,
                "metrics": request.app.state.metrics.snapshot(),
            },
            "Health check completed",
            request,
        )

    return application


app = create_app()
