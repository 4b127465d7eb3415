import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from gelp.api.v1.routes_categories import router as categories_router
from gelp.api.v1.routes_clients import router as clients_router
from gelp.api.v1.routes_dashboard import router as dashboard_router
from gelp.api.v1.routes_products import router as products_router
from gelp.api.v1.routes_sales import router as sales_router
from gelp.api.v1.routes_stock import router as stock_router
from gelp.api.v1.routes_suppliers import router as suppliers_router
from gelp.core.config import Settings, settings as default_settings
from gelp.core.errors import GelpError
from gelp.core.logging import configure_logging
from gelp.db.base import Database
from gelp.db.errors import translate_db_error

logger = logging.getLogger(__name__)


async def gelp_error_handler(request: Request, exc: GelpError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    error = translate_db_error(exc)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the API.

    Without ``database`` the storage handle is opened (and the schema
    created) at startup and closed at shutdown. A caller-supplied handle is
    used as-is and left for the caller to close.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = getattr(app.state, "db", None) is None
        if owned:
            app.state.db = Database.from_settings(settings)
            await app.state.db.create_all()
        logger.info("%s started", settings.APP_NAME)
        try:
            yield
        finally:
            if owned:
                await app.state.db.dispose()
                app.state.db = None

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.db = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(GelpError, gelp_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    app.include_router(categories_router)
    app.include_router(products_router)
    app.include_router(clients_router)
    app.include_router(suppliers_router)
    app.include_router(stock_router)
    app.include_router(sales_router)
    app.include_router(dashboard_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
