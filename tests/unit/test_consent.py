from proximity.consent import create_consent
from proximity.consent import is_consent_valid
from proximity.consent import revoke_consent


def test_create_defaults_to_no_permissions():
    consent = create_consent("user-1")

    assert consent.location_tracking is False
    assert consent.ble_discovery is False
    assert consent.granted_at
    assert consent.revoked_at is None
    assert is_consent_valid(consent) is False


def test_any_granted_permission_makes_consent_valid():
    assert is_consent_valid(create_consent("user-1", location_tracking=True))
    assert is_consent_valid(create_consent("user-1", ble_discovery=True))


def test_missing_consent_is_invalid():
    assert is_consent_valid(None) is False


def test_revoke_returns_revoked_copy():
    consent = create_consent("user-1", location_tracking=True, ble_discovery=True)

    revoked = revoke_consent(consent)

    assert revoked.revoked_at
    assert revoked.location_tracking is False
    assert revoked.ble_discovery is False
    assert revoked.granted_at == consent.granted_at
    assert is_consent_valid(revoked) is False
    assert is_consent_valid(consent) is True
