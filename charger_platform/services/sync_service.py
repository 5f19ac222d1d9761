from __future__ import annotations

import threading
from typing import Optional

import structlog

from charger_engine.ingestion.client import OpenChargeMapClient, StationClient
from charger_engine.ingestion.errors import SyncInProgressError
from charger_engine.ingestion.reconcile import Reconciler, ReconcileResult
from charger_engine.ingestion.storage import StationStore

from ..config import AppSettings

logger = structlog.get_logger()


class SyncService:
    """Runs reconciliations for POST /sync, one at a time per process."""

    def __init__(self, settings: AppSettings, store: StationStore, client: Optional[StationClient] = None):
        self.settings = settings
        self.store = store
        self.client = client or OpenChargeMapClient(
            base_url=settings.ocm_url,
            api_key=settings.ocm_api_key,
            timeout_connect=settings.http_timeout_connect,
            timeout_read=settings.http_timeout_read,
            max_retries=settings.http_max_retries,
        )
        self._lock = threading.Lock()

    def run(self) -> ReconcileResult:
        if not self._lock.acquire(blocking=False):
            raise SyncInProgressError("A charger sync is already running")
        try:
            reconciler = Reconciler(
                client=self.client,
                store=self.store,
                country_code=self.settings.country_code,
                max_results=self.settings.max_results,
                batch_size=self.settings.batch_size,
                scan_page_size=self.settings.scan_page_size,
                skip_delete_when_truncated=self.settings.skip_delete_when_truncated,
            )
            logger.info("sync_started", country_code=self.settings.country_code)
            result = reconciler.reconcile()
        finally:
            self._lock.release()
        logger.info(
            "sync_completed",
            written=result.written,
            deleted=result.deleted,
            truncated=result.truncated,
        )
        return result
