from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from charger_platform.api.main import create_app
from charger_platform.config import AppSettings

SITE_ORIGIN = "http://chargers-site.example"


class FakeStationClient:
    def __init__(self, stations: List[Dict[str, Any]] = None) -> None:
        self.stations = stations or []

    def fetch_stations(self, country_code: str, max_results: int) -> List[Dict[str, Any]]:
        return self.stations[:max_results]


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        database_url=f"sqlite:///{tmp_path / 'chargers.db'}",
        allowed_origin=SITE_ORIGIN,
        max_results=50,
        _env_file=None,
    )


@pytest.fixture
def station_client() -> FakeStationClient:
    return FakeStationClient()


@pytest.fixture
def app(settings, station_client):
    return create_app(settings, client=station_client)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
