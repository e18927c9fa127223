"""Stateless distance math and nearby filtering.

Coordinates passed in here are never stored.
"""

import math
from collections.abc import Iterable

from proximity.schemas import GeoPoint
from proximity.schemas import PresenceRecord
from proximity.schemas import PresenceStatus
from proximity.schemas import ProfileLocation
from proximity.utils import round_half_up

EARTH_RADIUS_METERS = 6_371_000

DEFAULT_BLE_RANGE_METERS = 30
DEFAULT_MAX_RANGE_METERS = 5000


def calculate_distance(origin: GeoPoint, destination: GeoPoint) -> float:
    """Haversine great-circle distance in meters."""
    d_lat = math.radians(destination.lat - origin.lat)
    d_lng = math.radians(destination.lng - origin.lng)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(origin.lat))
        * math.cos(math.radians(destination.lat))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def classify_distance(
    distance_meters: float,
    ble_range: float = DEFAULT_BLE_RANGE_METERS,
    max_range: float = DEFAULT_MAX_RANGE_METERS,
) -> PresenceStatus:
    if distance_meters <= ble_range:
        return PresenceStatus.NEARBY
    if distance_meters <= max_range:
        return PresenceStatus.IN_RANGE
    return PresenceStatus.OUT_OF_RANGE


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{round_half_up(meters)}m"
    return f"{meters / 1000:.1f}km"


def find_nearby(
    my_position: GeoPoint,
    candidates: Iterable[ProfileLocation],
    max_radius_meters: float = DEFAULT_MAX_RANGE_METERS,
    ble_range_meters: float = DEFAULT_BLE_RANGE_METERS,
) -> list[PresenceRecord]:
    """Profiles within max_radius_meters of my_position, closest first."""
    records = []
    for candidate in candidates:
        distance = calculate_distance(my_position, candidate.location)
        records.append(
            PresenceRecord(
                profile_id=candidate.profile_id,
                location=candidate.location,
                distance_meters=round_half_up(distance),
                distance_label=format_distance(distance),
                status=classify_distance(distance, ble_range_meters, max_radius_meters),
            )
        )

    nearby = [r for r in records if r.distance_meters <= max_radius_meters]
    nearby.sort(key=lambda r: r.distance_meters)
    return nearby
