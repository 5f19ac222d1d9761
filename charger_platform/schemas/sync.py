from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class SyncResponse(BaseModel):
    message: str
    count: int = Field(ge=0, description="Stations written in this run")
    deleted: int = Field(ge=0, description="Stale stations removed in this run")
    fetched_all: bool = Field(description="False when the upstream fetch hit its result cap")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {"message": "OCM data synced to store", "count": 112, "deleted": 3, "fetchedAll": True}
            ]
        },
    }
