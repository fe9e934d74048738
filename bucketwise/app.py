# app.py (Bucketwise Backend: bucket allocation & affordability API)

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import __version__, config
from .api.dependencies import verify_api_key
from .db.database import AsyncSessionLocal, create_db_and_tables, engine
from .services.bucket_service import BucketService

logger = logging.getLogger(__name__)


# --- Application Lifespan Context ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # ----------------------------------------
    # STARTUP: logging, tables, default catalog
    # ----------------------------------------
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Application startup: initializing services...")

    if config.CREATE_TABLES:
        await create_db_and_tables()
    if config.SEED_BUCKETS:
        async with AsyncSessionLocal() as session:
            async with session.begin():
                await BucketService(session).seed_default_buckets()

    yield

    # ----------------------------------------
    # SHUTDOWN: release pooled connections
    # ----------------------------------------
    logger.info("Application shutdown: disposing database engine...")
    await engine.dispose()


# Routers
from .api.v1.analytics import router as v1_analytics_router
from .api.v1.buckets import router as v1_buckets_router
from .api.v1.expenses import router as v1_expenses_router
from .api.v1.income import router as v1_income_router
from .api.v1.purchases import router as v1_purchases_router
from .api.v1.settings import router as v1_settings_router
from .api.v1.transactions import router as v1_transactions_router
from .api.v1.wishlist import router as v1_wishlist_router


app = FastAPI(
    title="Bucketwise Budgeting Backend",
    description="Envelope budgeting: income allocation across buckets, discipline-mode affordability checks and expense tracking.",
    version=__version__,
    dependencies=[Depends(verify_api_key)],
    lifespan=lifespan,
)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # The request session has already rolled back at this point
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "The database is temporarily unavailable. Please retry."},
    )


# Root Endpoint (basic health check)
@app.get("/", tags=["Health"])
async def read_root():
    return {"status": "ok", "service": "bucketwise", "version": __version__}


# -----------------------------------------------------------
# ROUTER REGISTRATION
# -----------------------------------------------------------

app.include_router(v1_buckets_router, prefix="/api/v1")
app.include_router(v1_income_router, prefix="/api/v1")
app.include_router(v1_purchases_router, prefix="/api/v1")
app.include_router(v1_expenses_router, prefix="/api/v1")
app.include_router(v1_wishlist_router, prefix="/api/v1")
app.include_router(v1_settings_router, prefix="/api/v1")
app.include_router(v1_transactions_router, prefix="/api/v1")
app.include_router(v1_analytics_router, prefix="/api/v1")
