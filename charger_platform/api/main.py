from typing import Optional

import time
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import create_engine
from starlette.exceptions import HTTPException

from charger_engine.ingestion.client import StationClient
from charger_engine.ingestion.models import create_tables
from charger_engine.ingestion.storage import StationStore

from ..config import AppSettings
from ..logging import init_logging
from .middleware import (
    RequestIDMiddleware,
    http_exception_handler,
    validation_exception_handler,
)
from .routes import chargers, health, sync
from ..services.station_service import StationService
from ..services.sync_service import SyncService


def create_app(settings: Optional[AppSettings] = None, client: Optional[StationClient] = None) -> FastAPI:
    settings = settings or AppSettings()
    init_logging(settings.log_level, settings.app_env)

    engine = create_engine(settings.database_url, future=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        create_tables(engine)
        yield
        engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "health", "description": "Service health and uptime"},
            {"name": "chargers", "description": "Charging stations by town"},
            {"name": "sync", "description": "Mirror Open Charge Map into the station table"},
        ],
    )

    # Last added runs outermost: CORS wraps RequestIDMiddleware, which renders unhandled errors
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(chargers.router, prefix="/chargers", tags=["chargers"])
    app.include_router(sync.router, prefix="/sync", tags=["sync"])

    app.state.settings = settings
    app.state.start_time = time.time()
    # Services hold no connections until first use, so tests without lifespan still work
    store = StationStore(engine)
    app.state.station_service = StationService(store)
    app.state.sync_service = SyncService(settings, store, client=client)

    return app


if __name__ == "__main__":
    import uvicorn

    s = AppSettings()
    uvicorn.run(create_app(s), host=s.host, port=s.port)
