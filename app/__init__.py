"""Application factory and top-level wiring for the stock ledger service.

``create_app`` brings together configuration, logging, database setup, API
routers and error handling. Nothing is built at import time, so tests can
import ``app.*`` modules and assemble their own application around a
throwaway engine.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException


def create_app(bind: Engine | None = None, *, instrument: bool = True) -> FastAPI:
    from prometheus_fastapi_instrumentator import Instrumentator

    from .core.config import settings
    from .core.errors import (
        LedgerError,
        http_exception_handler,
        ledger_exception_handler,
        validation_exception_handler,
    )
    from .core.logging import configure_logging
    from .db.migrate import run_migrations
    from .db.session import Base, engine
    from .middlewares import RequestIdMiddleware

    # Importing the models registers their tables with ``Base.metadata``.
    from .models import customer, item, purchase, sale, sequence, vendor  # noqa: F401
    from .routers import api_dashboard, api_purchases, api_sales

    configure_logging(settings.LOG_LEVEL)

    target = bind if bind is not None else engine
    Base.metadata.create_all(bind=target)
    run_migrations(target)

    application = FastAPI(title=settings.APP_NAME)
    application.add_middleware(RequestIdMiddleware)

    application.include_router(api_purchases.router)
    application.include_router(api_sales.router)
    application.include_router(api_dashboard.router)

    application.add_exception_handler(LedgerError, ledger_exception_handler)
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)

    @application.get("/health")
    async def health() -> dict[str, bool]:
        return {"ok": True}

    if instrument:
        Instrumentator().instrument(application).expose(application)

    return application


__all__ = ["create_app"]
