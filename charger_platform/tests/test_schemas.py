from charger_platform.schemas.chargers import Charger
from charger_platform.schemas.sync import SyncResponse


def test_charger_accepts_field_names_and_dumps_camel_case():
    charger = Charger(id="7", town="Belgrade", town_raw="Zemun", point_count=2)
    data = charger.model_dump(by_alias=True)
    assert data["townRaw"] == "Zemun"
    assert data["pointCount"] == 2
    assert Charger.model_validate(data) == charger


def test_sync_response_dumps_fetched_all():
    resp = SyncResponse(message="OCM data synced to store", count=3, deleted=0, fetched_all=False)
    assert resp.model_dump(by_alias=True)["fetchedAll"] is False
