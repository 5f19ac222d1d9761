from __future__ import annotations

from dataclasses import dataclass
from typing import List
from urllib.parse import unquote

from charger_engine.ingestion.errors import ClientInputError
from charger_engine.ingestion.normalize import StationRecord
from charger_engine.ingestion.storage import StationStore


@dataclass(frozen=True)
class TownChargers:
    town: str
    count: int
    chargers: List[StationRecord]


class StationService:
    """Read side of the station table, backing GET /chargers/{town}."""

    def __init__(self, store: StationStore):
        self.store = store

    def query_by_town(self, town_param: str) -> TownChargers:
        """Return every stored charger whose normalized town equals the decoded `town_param`.

        `town_param` is the percent-encoded path segment ("Novi%20Sad"); it is
        decoded exactly once. Matching is exact and case-sensitive, so callers
        pass the stored form, e.g. "Belgrade".
        """
        town = unquote(town_param or "")
        if not town.strip():
            raise ClientInputError("Town parameter is required")
        chargers = self.store.query_by_town(town)
        return TownChargers(town=town, count=len(chargers), chargers=chargers)
