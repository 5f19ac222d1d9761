import pytest

from charger_engine.ingestion.errors import ClientInputError
from charger_engine.ingestion.normalize import StationRecord
from charger_platform.services.station_service import StationService


class StubStore:
    def __init__(self, records):
        self.records = records
        self.queried = []

    def query_by_town(self, town):
        self.queried.append(town)
        return [r for r in self.records if r.town == town]


def test_query_decodes_town_once():
    store = StubStore([StationRecord(id="1", town="Novi Sad", town_raw="Novi Sad")])
    service = StationService(store)

    result = service.query_by_town("Novi%20Sad")
    assert result.town == "Novi Sad"
    assert result.count == 1

    service.query_by_town("100%2525")
    assert store.queried[-1] == "100%25"


@pytest.mark.parametrize("param", ["", "%20", "   ", None])
def test_missing_town_raises_client_error(param):
    with pytest.raises(ClientInputError):
        StationService(StubStore([])).query_by_town(param)
