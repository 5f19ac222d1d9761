from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class Charger(BaseModel):
    """Stored charging station, serialized with camelCase field names."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    id: str
    external_uid: Optional[str] = None
    town: str
    town_raw: str
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


class TownChargersResponse(BaseModel):
    town: str
    count: int = Field(ge=0)
    chargers: List[Charger]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "town": "Novi Sad",
                    "count": 1,
                    "chargers": [
                        {
                            "id": "187316",
                            "externalUid": "0F4C2E1A-2B6D-4C59-9E7A-3D1B5F6A7C80",
                            "town": "Novi Sad",
                            "townRaw": "Novi Sad",
                            "title": "Promenada",
                            "addressLine1": "Bulevar oslobođenja 119",
                            "postcode": "21000",
                            "latitude": 45.2449,
                            "longitude": 19.8422,
                            "pointCount": 2,
                            "expiresAt": 1709467200,
                        }
                    ],
                }
            ]
        }
    }
