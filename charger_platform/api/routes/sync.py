from fastapi import APIRouter, HTTPException, Request

import structlog
from charger_engine.ingestion.errors import SyncInProgressError
from ...schemas.sync import SyncResponse

router = APIRouter()
logger = structlog.get_logger()


@router.post(
    "",
    response_model=SyncResponse,
    summary="Sync chargers from Open Charge Map",
    responses={
        200: {"description": "Stations upserted and stale stations removed"},
        409: {"description": "A sync is already running"},
        500: {"description": "Upstream fetch or store write failed"},
    },
)
def sync_chargers(request: Request) -> SyncResponse:
    sync_service = request.app.state.sync_service

    try:
        result = sync_service.run()
    except SyncInProgressError as e:
        logger.warning("sync_rejected", error=str(e))
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.exception("sync_failed", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    return SyncResponse(
        message="OCM data synced to store",
        count=result.written,
        deleted=result.deleted,
        fetched_all=not result.truncated,
    )
