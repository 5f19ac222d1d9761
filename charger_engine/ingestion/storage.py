from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Set

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import StoreReadError, StoreWriteError
from .models import Station
from .normalize import StationRecord, record_to_dict

# Largest number of items accepted by a single batch put or delete.
MAX_BATCH_SIZE = 25

logger = structlog.get_logger()


def _to_record(row: Station) -> StationRecord:
    return StationRecord(**{name: getattr(row, name) for name in StationRecord.__dataclass_fields__})


class StationStore:
    """Station table access used by the reconciler and the town lookup.

    Every batch operation runs in its own transaction, so a batch is applied
    completely or not at all while earlier batches stay committed.
    """

    max_batch_size = MAX_BATCH_SIZE

    def __init__(self, engine) -> None:
        self.engine = engine

    def query_by_town(self, town: str) -> List[StationRecord]:
        """Return every station whose normalized town equals `town` exactly."""
        stmt = select(Station).where(Station.town == town).order_by(Station.id)
        try:
            with Session(self.engine) as session:
                rows = session.execute(stmt).scalars().all()
                return [_to_record(r) for r in rows]
        except SQLAlchemyError as e:
            raise StoreReadError(f"Town query failed for {town!r}: {e}") from e

    def put_batch(self, records: Sequence[StationRecord]) -> None:
        """Insert or overwrite a batch of stations in one transaction."""
        self._check_batch_size(len(records))
        if not records:
            return
        try:
            with Session(self.engine) as session, session.begin():
                for record in records:
                    session.merge(Station(**record_to_dict(record)))
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Batch put of {len(records)} stations failed: {e}") from e

    def delete_batch(self, ids: Sequence[str]) -> None:
        """Delete a batch of stations by id in one transaction."""
        self._check_batch_size(len(ids))
        if not ids:
            return
        try:
            with Session(self.engine) as session, session.begin():
                session.execute(delete(Station).where(Station.id.in_(list(ids))))
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Batch delete of {len(ids)} stations failed: {e}") from e

    def scan_ids(self, page_size: int = 1000) -> Set[str]:
        """Return the ids of every stored station.

        Pages through the table in id order, continuing after the last id of
        the previous page until a short page is returned.
        """
        if page_size <= 0:
            raise ValueError("page_size must be > 0")
        ids: Set[str] = set()
        last_id: Optional[str] = None
        pages = 0
        try:
            with Session(self.engine) as session:
                while True:
                    stmt = select(Station.id).order_by(Station.id).limit(page_size)
                    if last_id is not None:
                        stmt = stmt.where(Station.id > last_id)
                    page = session.execute(stmt).scalars().all()
                    pages += 1
                    ids.update(page)
                    if len(page) < page_size:
                        break
                    last_id = page[-1]
        except SQLAlchemyError as e:
            raise StoreReadError(f"Station id scan failed: {e}") from e
        logger.debug("station_ids_scanned", count=len(ids), pages=pages)
        return ids

    def count(self) -> int:
        try:
            with Session(self.engine) as session:
                return int(session.execute(select(func.count()).select_from(Station)).scalar_one())
        except SQLAlchemyError as e:
            raise StoreReadError(f"Station count failed: {e}") from e

    def town_counts(self) -> Dict[str, int]:
        """Number of stations per normalized town, largest first."""
        stmt = (
            select(Station.town, func.count().label("stations"))
            .group_by(Station.town)
            .order_by(func.count().desc(), Station.town)
        )
        try:
            with Session(self.engine) as session:
                return {town: int(n) for town, n in session.execute(stmt).all()}
        except SQLAlchemyError as e:
            raise StoreReadError(f"Town count query failed: {e}") from e

    def _check_batch_size(self, size: int) -> None:
        if size > self.max_batch_size:
            raise ValueError(f"Batch of {size} exceeds store limit of {self.max_batch_size}")
