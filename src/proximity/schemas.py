# schemas.py
from enum import Enum
from typing import Any
from typing import Optional
from typing import Union

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class GeoPoint(CamelModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)


class PresenceStatus(str, Enum):
    NEARBY = "nearby"
    IN_RANGE = "in_range"
    OUT_OF_RANGE = "out_of_range"
    UNKNOWN = "unknown"


class ProfileLocation(CamelModel):
    profile_id: str
    location: GeoPoint


class PresenceRecord(CamelModel):
    profile_id: str
    location: GeoPoint
    distance_meters: int
    distance_label: str
    status: PresenceStatus


class LocationConsent(CamelModel):
    profile_id: str
    location_tracking: bool = False
    ble_discovery: bool = False
    granted_at: str
    revoked_at: Optional[str] = None


# === Request bodies ===


class CalculateRequest(BaseModel):
    origin: GeoPoint = Field(alias="from")
    destination: GeoPoint = Field(alias="to")


class NearbyRequest(CamelModel):
    my_position: GeoPoint
    candidates: list[ProfileLocation]
    max_radius_meters: Optional[Union[int, float]] = Field(default=None, gt=0)


class ConsentRequest(CamelModel):
    action: Optional[str] = None
    profile_id: Optional[str] = None
    location_tracking: Optional[bool] = None
    ble_discovery: Optional[bool] = None
    consent: Optional[LocationConsent] = None


class BroadcastCreate(CamelModel):
    channel_id: str = Field(min_length=1)
    profile_id: str = Field(min_length=1)
    location: GeoPoint
    # Opaque pass-through, no schema enforced.
    metadata: Any = None


# === Broadcasting ===


class BroadcastEvent(CamelModel):
    profile_id: str
    location: GeoPoint
    timestamp: str
    metadata: Any = None

    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> dict[str, Any]:
        payload = {
            "profileId": self.profile_id,
            "location": self.location.to_wire(),
            "timestamp": self.timestamp,
        }
        # Forwarded verbatim whenever the publisher sent it, null included
        if "metadata" in self.model_fields_set:
            payload["metadata"] = self.metadata
        return payload


class ChannelInfo(CamelModel):
    channel_id: str
    subscriber_count: int
