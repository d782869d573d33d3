# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from medstock.core.config import (
    APP_ENV,
    APP_VERSION,
    CORS_ORIGINS,
    DATABASE_URL,
    ENABLE_SCHEDULER,
    SEED_DEMO_DATA,
)
from medstock.core.error_handlers import (
    app_exception_handler,
    http_exception_handler,
    integrity_error_handler,
    storage_error_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from medstock.core.exceptions import AppException
from medstock.core.logging import setup_logging
from medstock.core.scheduler import build_scheduler
from medstock.middleware.request_logging import request_logging_middleware
from medstock.routers import dashboard_router, movement_router, product_router
from medstock.scripts.seed_data import seed_demo_products
from medstock.services.ledger_store import LedgerStore

APP_NAME = "MedStock – Medical Supplies Inventory API"

# ------------------------------------------------------------------------------
# LOGGING
# ------------------------------------------------------------------------------
setup_logging()
logger = logging.getLogger(__name__)


def create_app(
    database_url: Optional[str] = None,
    *,
    store: Optional[LedgerStore] = None,
    create_tables: Optional[bool] = None,
    seed: Optional[bool] = None,
    enable_scheduler: Optional[bool] = None,
) -> FastAPI:
    create_tables = APP_ENV == "development" if create_tables is None else create_tables
    seed = SEED_DEMO_DATA if seed is None else seed
    enable_scheduler = ENABLE_SCHEDULER if enable_scheduler is None else enable_scheduler

    # --------------------------------------------------------------------------
    # LIFESPAN
    # --------------------------------------------------------------------------
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting application (%s)", APP_ENV)

        owns_store = getattr(app.state, "store", None) is None
        if owns_store:
            app.state.store = LedgerStore.from_url(database_url or DATABASE_URL)
        ledger: LedgerStore = app.state.store

        if create_tables:
            await ledger.create_all()
            logger.info("Database tables ensured")

        if seed:
            await seed_demo_products(ledger)

        scheduler = None
        if enable_scheduler:
            scheduler = build_scheduler(ledger)
            scheduler.start()
            logger.info("Stock alert scheduler started")

        yield

        logger.info("Shutting down application")
        if scheduler is not None and scheduler.running:
            scheduler.shutdown()
        if owns_store:
            await ledger.dispose()
            app.state.store = None

    app = FastAPI(
        title=APP_NAME,
        description="Products, stock movements and expiry alerts for medical supplies",
        version=APP_VERSION,
        docs_url="/docs" if APP_ENV != "production" else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Callers that build their own store (tests, scripts) hand it over directly
    app.state.store = store

    # --------------------------------------------------------------------------
    # EXCEPTION HANDLERS
    # --------------------------------------------------------------------------
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------------------
    # MIDDLEWARE
    # --------------------------------------------------------------------------
    app.middleware("http")(request_logging_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --------------------------------------------------------------------------
    # HEALTH CHECK
    # --------------------------------------------------------------------------
    @app.get("/", tags=["Health"])
    async def health_check():
        return {
            "status": "ok",
            "service": "medstock-api",
            "environment": APP_ENV,
            "version": APP_VERSION,
        }

    # --------------------------------------------------------------------------
    # ROUTERS
    # --------------------------------------------------------------------------
    app.include_router(product_router)
    app.include_router(movement_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
