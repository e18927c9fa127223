from typing import Optional

from proximity.schemas import LocationConsent
from proximity.utils import utc_timestamp


def create_consent(
    profile_id: str, location_tracking: bool = False, ble_discovery: bool = False
) -> LocationConsent:
    return LocationConsent(
        profile_id=profile_id,
        location_tracking=location_tracking,
        ble_discovery=ble_discovery,
        granted_at=utc_timestamp(),
    )


def is_consent_valid(consent: Optional[LocationConsent]) -> bool:
    if consent is None:
        return False
    if consent.revoked_at:
        return False
    return consent.location_tracking or consent.ble_discovery


def revoke_consent(consent: LocationConsent) -> LocationConsent:
    """Returns a revoked copy; the input record is left untouched."""
    return consent.model_copy(
        update={
            "location_tracking": False,
            "ble_discovery": False,
            "revoked_at": utc_timestamp(),
        }
    )
