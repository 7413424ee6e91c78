"""
FastAPI Application Entry Point

Kitchen Sheet - order journal and kitchen projection.

Endpoints:
    - GET  /api/menu: Current menu for the ordering page
    - POST /api/orders: Submit an order
    - GET  /api/status, PUT /api/status: Published/paused switch
    - GET  /api/projection: Kitchen projection with totals and shorthand
    - POST /api/projection/rebuild: Replay the journal into the projection
    - GET  /health: System health check

Version: 1.0.0
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import redis
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kitchen_sheet.core.config import JournalBackend, get_settings, setup_logging
from kitchen_sheet.core.exceptions import KitchenSheetError, MalformedPayloadError
from kitchen_sheet.engine.columns import build_columns, columns_from_headers, headers
from kitchen_sheet.engine.shorthand import kitchen_summary
from kitchen_sheet.schemas import (
    ErrorResponse,
    HealthResponse,
    MenuItemOut,
    MenuResponse,
    OrderCreateResponse,
    OrderSubmission,
    ProjectionResponse,
    RebuildResponse,
    StatusResponse,
    StatusUpdate,
)
from kitchen_sheet.services.catalog import BaseCatalogSource, get_catalog_source
from kitchen_sheet.services.ingestion import IngestionOutcome, ingest_order
from kitchen_sheet.services.journal import BaseJournalStore, get_journal_store
from kitchen_sheet.services.projection import BaseProjectionStore, get_projection_store
from kitchen_sheet.services.rebuilder import rebuild_projection
from kitchen_sheet.services.status import StatusStore, get_status_store

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    if settings.journal_backend == JournalBackend.DATABASE:
        from kitchen_sheet.database import get_engine, init_db

        await init_db()
        logger.info("✅ Journal database initialized")

    journal = get_journal_store()
    projection = get_projection_store()
    catalog_source = get_catalog_source()
    logger.info(f"✅ Journal Store: {journal.provider_name}")
    logger.info(f"✅ Projection Store: {projection.provider_name}")
    logger.info(f"✅ Catalog Source: {catalog_source.provider_name}")

    # A brand-new projection gets its headers from the current menu
    if not await run_in_threadpool(projection.columns):
        catalog = await run_in_threadpool(catalog_source.load)
        names = headers(build_columns(catalog))
        await run_in_threadpool(projection.set_columns, names)
        logger.info(f"✅ Projection schema created ({len(names)} columns)")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    logger.info("Shutting down...")
    if settings.journal_backend == JournalBackend.DATABASE:
        await get_engine().dispose()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Append-only order journal with a rebuildable kitchen projection. "
        "Orders are journaled first, then projected into the kitchen workbook."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    journal: BaseJournalStore = Depends(get_journal_store),
    projection: BaseProjectionStore = Depends(get_projection_store),
) -> HealthResponse:
    """Verify all system components are operational."""

    journal_status = "healthy" if await journal.health_check() else "unhealthy"
    projection_status = "healthy" if await run_in_threadpool(projection.health_check) else "unhealthy"

    # Redis only backs background rebuilds; orders keep flowing without it
    redis_status = "healthy"
    try:
        r = redis.Redis.from_url(settings.redis_url, socket_timeout=2)
        r.ping()
        r.close()
    except redis.RedisError as e:
        redis_status = f"unhealthy: {str(e)}"
        logger.error(f"Redis health check failed: {e}")

    overall = "operational" if journal_status == projection_status == "healthy" else "degraded"

    return HealthResponse(
        status=overall,
        journal=journal_status,
        projection=projection_status,
        redis=redis_status,
        timestamp=datetime.now(),
    )


# =============================================================================
# MENU & STATUS ENDPOINTS
# =============================================================================

@app.get(
    "/api/menu",
    response_model=MenuResponse,
    tags=["Menu"],
    summary="Current Menu",
)
def get_menu(
    catalog_source: BaseCatalogSource = Depends(get_catalog_source),
    status_store: StatusStore = Depends(get_status_store),
) -> MenuResponse:
    """Serve the menu the ordering page renders."""
    catalog = catalog_source.load()
    return MenuResponse(
        status=status_store.get(),
        menu=[
            MenuItemOut(
                name=item.name,
                price=item.price,
                category=item.category,
                description=item.description,
                options=item.options_definition,
            )
            for item in catalog
        ],
    )


@app.get("/api/status", response_model=StatusResponse, tags=["Status"])
def get_status(status_store: StatusStore = Depends(get_status_store)) -> StatusResponse:
    return StatusResponse(status=status_store.get())


@app.put("/api/status", response_model=StatusResponse, tags=["Status"])
def set_status(
    update: StatusUpdate,
    status_store: StatusStore = Depends(get_status_store),
) -> StatusResponse:
    """Publish or pause ordering."""
    return StatusResponse(status=status_store.set(update.status))


# =============================================================================
# ORDER API ENDPOINTS
# =============================================================================

@app.post(
    "/api/orders",
    response_model=OrderCreateResponse,
    responses={503: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Submit Order",
)
async def create_order(
    submission: OrderSubmission,
    journal: BaseJournalStore = Depends(get_journal_store),
    projection: BaseProjectionStore = Depends(get_projection_store),
    status_store: StatusStore = Depends(get_status_store),
) -> OrderCreateResponse:
    """
    Submit an order.

    The order is journaled before the projection is touched. When ordering
    is paused nothing is stored and 503 is returned.
    """
    logger.info(f"Order received from: {submission.name}")

    try:
        record = submission.to_record(timestamp=datetime.now())
    except MalformedPayloadError as e:
        raise HTTPException(status_code=422, detail=str(e))

    status = await run_in_threadpool(status_store.get)
    result = await ingest_order(record, journal, projection, status=status)

    if result.outcome == IngestionOutcome.UNAVAILABLE:
        raise HTTPException(status_code=503, detail="Ordering is currently paused")

    return OrderCreateResponse(
        success=True,
        message="Order submitted successfully!",
        entry_id=result.entry_id,
        projected=result.projected,
        unmatched_items=list(result.unmatched_items),
    )


# =============================================================================
# PROJECTION ENDPOINTS
# =============================================================================

@app.get(
    "/api/projection",
    response_model=ProjectionResponse,
    tags=["Projection"],
)
def get_projection(
    projection: BaseProjectionStore = Depends(get_projection_store),
) -> ProjectionResponse:
    """
    Current projection rows, totals and kitchen shorthand.

    A plain function, so FastAPI runs the workbook read in its threadpool.
    """
    with projection.transaction():
        names = projection.columns()
        rows = projection.rows()
        totals = projection.totals_row()

    kitchen = []
    if totals is not None:
        kitchen = [line.to_dict() for line in kitchen_summary(totals, columns_from_headers(names))]

    return ProjectionResponse(headers=names, orders=len(rows), rows=rows, totals=totals, kitchen=kitchen)


@app.post(
    "/api/projection/rebuild",
    response_model=RebuildResponse,
    tags=["Projection"],
    summary="Rebuild Projection From Journal",
)
async def rebuild(
    refresh: bool = Query(True, description="Rebuild the column schema from the current menu first"),
    journal: BaseJournalStore = Depends(get_journal_store),
    projection: BaseProjectionStore = Depends(get_projection_store),
    catalog_source: BaseCatalogSource = Depends(get_catalog_source),
) -> RebuildResponse:
    """Discard every projection row and replay the journal."""
    catalog = await run_in_threadpool(catalog_source.load) if refresh else None
    report = await rebuild_projection(journal, projection, catalog=catalog)
    return RebuildResponse(**report.to_dict())


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(KitchenSheetError)
async def kitchen_sheet_exception_handler(request: Request, exc: KitchenSheetError) -> JSONResponse:
    logger.error(f"{type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": type(exc).__name__, "detail": str(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )
