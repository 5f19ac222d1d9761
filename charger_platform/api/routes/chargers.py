from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Request

import structlog
from charger_engine.ingestion.errors import ClientInputError
from charger_engine.ingestion.normalize import record_to_dict
from ...schemas.chargers import Charger, TownChargersResponse

router = APIRouter()
logger = structlog.get_logger()


def _encoded_town(request: Request, town: str) -> str:
    """Town path segment as sent by the client, before any percent-decoding."""
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return quote(town, safe="")
    return raw_path.decode("latin-1").rsplit("/", 1)[-1]


@router.get("", include_in_schema=False)
@router.get("/", summary="Missing town", responses={400: {"description": "Town parameter is required"}})
def missing_town() -> None:
    raise HTTPException(status_code=400, detail="Town parameter is required")


@router.get(
    "/{town}",
    response_model=TownChargersResponse,
    summary="Chargers in a town",
    responses={
        200: {"description": "Every stored charger whose normalized town matches exactly"},
        400: {"description": "Town parameter is required"},
        500: {"description": "Store query failed"},
    },
)
def chargers_by_town(request: Request, town: str) -> TownChargersResponse:
    station_service = request.app.state.station_service

    try:
        result = station_service.query_by_town(_encoded_town(request, town))
    except ClientInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("chargers_query_failed", town=town, error=str(e))
        raise HTTPException(status_code=500, detail=str(e))

    logger.info("chargers_found", town=result.town, count=result.count)
    return TownChargersResponse(
        town=result.town,
        count=result.count,
        chargers=[Charger.model_validate(record_to_dict(r)) for r in result.chargers],
    )
