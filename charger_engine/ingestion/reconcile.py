from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Callable, Iterator, List, Sequence, TypeVar

import structlog

from .client import StationClient
from .normalize import StationRecord, expires_at_for, normalize_station
from .storage import StationStore

T = TypeVar("T")

DEFAULT_COUNTRY_CODE = "RS"
# Serbia has roughly a hundred stations on Open Charge Map
DEFAULT_MAX_RESULTS = 1000

logger = structlog.get_logger()


def _utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    """Yield consecutive slices of `items` holding at most `size` elements."""
    if size <= 0:
        raise ValueError("size must be > 0")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


@dataclass(frozen=True)
class ReconcileResult:
    written: int
    deleted: int
    truncated: bool


@dataclass
class Reconciler:
    """Mirror the upstream station set into the station table.

    A run upserts every fetched station, then deletes stored stations whose
    id was not fetched. Batches are applied one at a time; the first failing
    batch aborts the run and leaves already committed batches in place.

    When the fetch hits `max_results` the upstream set may be incomplete and
    the run is flagged as truncated. Deletion still runs against the
    truncated set unless `skip_delete_when_truncated` is set.
    """

    client: StationClient
    store: StationStore
    country_code: str = DEFAULT_COUNTRY_CODE
    max_results: int = DEFAULT_MAX_RESULTS
    batch_size: int = 25
    scan_page_size: int = 1000
    skip_delete_when_truncated: bool = False
    clock: Callable[[], dt.datetime] = _utc_now

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError("batch_size must be > 0")
        if self.batch_size > self.store.max_batch_size:
            raise ValueError(
                f"batch_size {self.batch_size} exceeds store limit of {self.store.max_batch_size}"
            )
        if self.max_results <= 0:
            raise ValueError("max_results must be > 0")

    def reconcile(self) -> ReconcileResult:
        log = logger.bind(country_code=self.country_code)

        raw_stations = self.client.fetch_stations(self.country_code, self.max_results)
        truncated = len(raw_stations) >= self.max_results
        if truncated:
            log.warning("ocm_fetch_truncated", fetched=len(raw_stations), max_results=self.max_results)
        else:
            log.info("ocm_fetch_complete", fetched=len(raw_stations))

        expires_at = expires_at_for(self.clock())
        records = [normalize_station(raw, expires_at) for raw in raw_stations]
        wanted_ids = {r.id for r in records}

        written = self._upsert(records)
        log.info("stations_written", written=written)

        if truncated and self.skip_delete_when_truncated:
            log.warning("stale_deletion_skipped", reason="truncated_fetch")
            return ReconcileResult(written=written, deleted=0, truncated=truncated)

        stale_ids = sorted(self.store.scan_ids(self.scan_page_size) - wanted_ids)
        deleted = self._delete(stale_ids)
        if deleted:
            log.info("stale_records_deleted", deleted=deleted)

        return ReconcileResult(written=written, deleted=deleted, truncated=truncated)

    def _upsert(self, records: Sequence[StationRecord]) -> int:
        for n, batch in enumerate(chunked(records, self.batch_size), start=1):
            log = logger.bind(batch=n, size=len(batch))
            try:
                self.store.put_batch(batch)
            except Exception:
                log.debug("upsert_batch_failed")
                raise
            log.debug("upsert_batch_written")
        return len(records)

    def _delete(self, stale_ids: Sequence[str]) -> int:
        if not stale_ids:
            return 0
        logger.info("deleting_stale_records", count=len(stale_ids))
        for n, batch in enumerate(chunked(stale_ids, self.batch_size), start=1):
            log = logger.bind(batch=n, size=len(batch))
            try:
                self.store.delete_batch(batch)
            except Exception:
                log.debug("delete_batch_failed")
                raise
            log.debug("delete_batch_applied")
        return len(stale_ids)

