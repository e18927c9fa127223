import air
from air.responses import JSONResponse
from fastapi import APIRouter
from fastapi import Depends

from proximity.broadcaster import Broadcaster
from proximity.consent import create_consent
from proximity.consent import is_consent_valid
from proximity.consent import revoke_consent
from proximity.deps import get_broadcaster
from proximity.errors import InvalidInput
from proximity.geo import calculate_distance
from proximity.geo import classify_distance
from proximity.geo import find_nearby
from proximity.geo import format_distance
from proximity.openapi import SERVICE_NAME
from proximity.schemas import CalculateRequest
from proximity.schemas import ConsentRequest
from proximity.schemas import NearbyRequest
from proximity.settings import settings
from proximity.utils import read_model
from proximity.utils import round_half_up

router = APIRouter(prefix="/api/proximity", tags=["proximity"])


@router.get("/status")
def service_status(broadcaster: Broadcaster = Depends(get_broadcaster)):
    channels = broadcaster.channels()
    return JSONResponse(
        {
            "service": SERVICE_NAME,
            "capabilities": {
                "gps": True,
                "ble": False,  # BLE scanning happens on the client
                "distanceCalculation": True,
                "nearbyFiltering": True,
                "consentManagement": True,
                "realtimeBroadcasting": True,
            },
            "defaults": {
                "maxRangeMeters": settings.max_range_meters,
                "bleRangeMeters": settings.ble_range_meters,
            },
            "gdpr": {
                "consentRequired": True,
                "consentRevocable": True,
                "dataMinimization": "Coordinates are never stored. All calculations are stateless.",
            },
            "broadcast": {
                "channels": len(channels),
                "subscribers": sum(c.subscriber_count for c in channels),
            },
        }
    )


@router.post("/calculate")
async def calculate(request: air.Request):
    data = await read_model(request, CalculateRequest)
    distance = calculate_distance(data.origin, data.destination)

    return JSONResponse(
        {
            "from": data.origin.to_wire(),
            "to": data.destination.to_wire(),
            "distanceMeters": round_half_up(distance),
            "distanceLabel": format_distance(distance),
            "status": classify_distance(
                distance, settings.ble_range_meters, settings.max_range_meters
            ).value,
        }
    )


@router.post("/nearby")
async def nearby(request: air.Request):
    data = await read_model(request, NearbyRequest)
    max_radius = data.max_radius_meters or settings.max_range_meters

    records = find_nearby(
        data.my_position,
        data.candidates,
        max_radius_meters=max_radius,
        ble_range_meters=settings.ble_range_meters,
    )

    return JSONResponse(
        {
            "nearby": [r.to_wire() for r in records],
            "count": len(records),
            "totalCandidates": len(data.candidates),
            "maxRadiusMeters": max_radius,
        }
    )


@router.post("/consent")
async def manage_consent(request: air.Request):
    data = await read_model(request, ConsentRequest)

    if data.action == "create":
        if not data.profile_id:
            raise InvalidInput('"profileId" is required')
        consent = create_consent(
            data.profile_id,
            location_tracking=bool(data.location_tracking),
            ble_discovery=bool(data.ble_discovery),
        )
        return JSONResponse({"consent": consent.to_wire(), "valid": is_consent_valid(consent)})

    if data.action == "validate":
        if data.consent is None:
            raise InvalidInput('"consent" object is required for validation')
        return JSONResponse(
            {"valid": is_consent_valid(data.consent), "consent": data.consent.to_wire()}
        )

    if data.action == "revoke":
        if data.consent is None:
            raise InvalidInput('"consent" object is required for revocation')
        revoked = revoke_consent(data.consent)
        return JSONResponse({"consent": revoked.to_wire(), "valid": False})

    raise InvalidInput('action must be "create", "validate", or "revoke"')
