import time
from fastapi import APIRouter, Request

import structlog
from charger_engine.ingestion.errors import StoreReadError
from ...schemas.health import HealthResponse

router = APIRouter()
logger = structlog.get_logger()


@router.get(
    "/",
    response_model=HealthResponse,
    summary="Health status",
    responses={
        200: {
            "description": "Service status; `degraded` when the station table is unreadable",
            "content": {
                "application/json": {
                    "example": {"status": "ok", "uptime_s": 12.34, "version": "0.1.0", "stations": 112}
                }
            },
        }
    },
)
def health(request: Request) -> HealthResponse:
    settings = request.app.state.settings
    uptime = max(0.0, time.time() - float(getattr(request.app.state, "start_time", time.time())))
    try:
        stations = request.app.state.station_service.store.count()
    except StoreReadError as e:
        logger.warning("health_store_unreadable", error=str(e))
        return HealthResponse(status="degraded", uptime_s=uptime, version=settings.app_version)
    return HealthResponse(status="ok", uptime_s=uptime, version=settings.app_version, stations=stations)
