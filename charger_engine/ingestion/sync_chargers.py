from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Optional

from sqlalchemy import create_engine

from charger_engine.ingestion.client import OpenChargeMapClient
from charger_engine.ingestion.errors import ChargerSyncError
from charger_engine.ingestion.models import create_tables
from charger_engine.ingestion.reconcile import (
    DEFAULT_COUNTRY_CODE,
    DEFAULT_MAX_RESULTS,
    Reconciler,
    ReconcileResult,
)
from charger_engine.ingestion.storage import MAX_BATCH_SIZE, StationStore


def sync_chargers(
    db_url: str,
    ocm_url: str,
    api_key: Optional[str] = None,
    country_code: str = DEFAULT_COUNTRY_CODE,
    max_results: int = DEFAULT_MAX_RESULTS,
    batch_size: int = MAX_BATCH_SIZE,
    skip_delete_when_truncated: bool = False,
) -> ReconcileResult:
    """Run one reconciliation of Open Charge Map stations into the DB.

    Parameters
    ----------
    db_url : str
        SQLAlchemy database URL (e.g., sqlite:///chargers.db).
    ocm_url : str
        Open Charge Map POI endpoint.
    api_key : Optional[str]
        Open Charge Map API key; sent as the `key` query parameter.
    country_code : str
        Country whose stations are mirrored.
    max_results : int
        Cap on the number of fetched stations.
    batch_size : int
        Stations per batch put or delete.
    skip_delete_when_truncated : bool
        Keep stored stations when the fetch hit `max_results`.
    """
    engine = create_engine(db_url, future=True)
    create_tables(engine)
    try:
        reconciler = Reconciler(
            client=OpenChargeMapClient(base_url=ocm_url, api_key=api_key),
            store=StationStore(engine),
            country_code=country_code,
            max_results=max_results,
            batch_size=batch_size,
            skip_delete_when_truncated=skip_delete_when_truncated,
        )
        return reconciler.reconcile()
    finally:
        engine.dispose()


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Mirror Open Charge Map stations into the station table")
    p.add_argument("--db-url", required=True, help="SQLAlchemy URL, e.g., sqlite:///chargers.db")
    p.add_argument(
        "--ocm-url",
        default=os.getenv("OCM_URL", "https://api.openchargemap.io/v3/poi/"),
        help="Open Charge Map POI endpoint (default: $OCM_URL or the public API)",
    )
    p.add_argument(
        "--api-key",
        default=os.getenv("OCM_API_KEY"),
        help="Open Charge Map API key (default: $OCM_API_KEY)",
    )
    p.add_argument("--country", default=DEFAULT_COUNTRY_CODE, help="ISO country code to mirror")
    p.add_argument("--max-results", type=int, default=DEFAULT_MAX_RESULTS)
    p.add_argument("--batch-size", type=int, default=MAX_BATCH_SIZE)
    p.add_argument(
        "--skip-delete-when-truncated",
        action="store_true",
        help="Do not delete stale stations when the fetch hit --max-results",
    )
    return p.parse_args()


def main() -> None:
    args = _parse_args()
    try:
        result = sync_chargers(
            args.db_url,
            args.ocm_url,
            api_key=args.api_key,
            country_code=args.country,
            max_results=args.max_results,
            batch_size=args.batch_size,
            skip_delete_when_truncated=args.skip_delete_when_truncated,
        )
    except ChargerSyncError as e:
        print(f"Sync failed: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps({
        "written": result.written,
        "deleted": result.deleted,
        "truncated": result.truncated,
    }))


if __name__ == "__main__":
    main()
