from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .errors import MalformedStationError

CAPITAL = "Belgrade"
CAPITAL_SPELLINGS = frozenset({"Belgrad", "Belgrade", "Beograd"})
# Belgrade postal codes: 11000-11999
CAPITAL_POSTCODE_PREFIX = "11"
UNKNOWN_TOWN = "Unknown"

EXPIRY = dt.timedelta(days=2)


@dataclass(frozen=True)
class StationRecord:
    """Charging station as persisted in the station table.

    Only `id`, `town` and `town_raw` are guaranteed to be present; every other
    field mirrors the upstream record and may be None.
    """

    id: str
    town: str
    town_raw: str
    external_uid: Optional[str] = None
    title: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    postcode: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    verified_recently: Optional[bool] = None
    created_at: Optional[str] = None
    last_verified_at: Optional[str] = None
    last_status_update_at: Optional[str] = None
    point_count: Optional[int] = None
    expires_at: Optional[int] = None


def expires_at_for(now: dt.datetime) -> int:
    """Advisory expiry (unix seconds) for records written by a run started at `now`."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt.timezone.utc)
    return int((now + EXPIRY).timestamp())


def resolve_town(town: Optional[str], postcode: Optional[str]) -> str:
    """Map an upstream town name to the name used by the town index.

    The capital shows up under several spellings, and some of its stations
    carry a suburb name instead; both are folded into `CAPITAL`.
    """
    if town in CAPITAL_SPELLINGS:
        return CAPITAL
    if postcode and postcode.startswith(CAPITAL_POSTCODE_PREFIX):
        return CAPITAL
    return town or UNKNOWN_TOWN


def normalize_station(raw: Mapping[str, Any], expires_at: int) -> StationRecord:
    """Convert one raw Open Charge Map POI into a `StationRecord`.

    Parameters
    ----------
    raw : Mapping
        POI object as returned by the upstream API (compact, non-verbose).
        Address fields live under the nested `AddressInfo` object.
    expires_at : int
        Expiry timestamp shared by every record of the current run.

    Raises
    ------
    MalformedStationError
        If the record is not an object or has no `ID`.
    """
    if not isinstance(raw, Mapping):
        raise MalformedStationError(f"Upstream station record is not an object: {type(raw).__name__}")
    station_id = raw.get("ID")
    if station_id is None or str(station_id) == "":
        raise MalformedStationError("Upstream station record has no ID")

    address = raw.get("AddressInfo")
    if not isinstance(address, Mapping):
        address = {}

    town = _text(address.get("Town"))
    postcode = _text(address.get("Postcode"))

    return StationRecord(
        id=str(station_id),
        town=resolve_town(town, postcode),
        town_raw=town or UNKNOWN_TOWN,
        external_uid=_text(raw.get("UUID")),
        title=_text(address.get("Title")),
        address_line1=_text(address.get("AddressLine1")),
        address_line2=_text(address.get("AddressLine2")),
        postcode=postcode,
        latitude=_number(address.get("Latitude")),
        longitude=_number(address.get("Longitude")),
        verified_recently=raw.get("IsRecentlyVerified") if isinstance(raw.get("IsRecentlyVerified"), bool) else None,
        created_at=_text(raw.get("DateCreated")),
        last_verified_at=_text(raw.get("DateLastVerified")),
        last_status_update_at=_text(raw.get("DateLastStatusUpdate")),
        point_count=_integer(raw.get("NumberOfPoints")),
        expires_at=expires_at,
    )


def record_to_dict(record: StationRecord) -> Dict[str, Any]:
    return {name: getattr(record, name) for name in record.__dataclass_fields__}


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    # Postcodes occasionally arrive as bare numbers
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _integer(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value
