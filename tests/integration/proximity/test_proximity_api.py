import pytest

MY_POSITION = {"lat": 52.52, "lng": 13.405}

CANDIDATES = [
    {"profileId": "close-1", "location": {"lat": 52.5186, "lng": 13.3761}},
    {"profileId": "close-2", "location": {"lat": 52.5096, "lng": 13.3761}},
    {"profileId": "medium", "location": {"lat": 52.4631, "lng": 13.3209}},
    {"profileId": "far-away", "location": {"lat": 48.1351, "lng": 11.582}},
    {"profileId": "very-close", "location": {"lat": 52.521, "lng": 13.407}},
]


@pytest.mark.asyncio
async def test_health_is_public(anonymous_client):
    resp = await anonymous_client.get("/health")
    assert resp.status_code == 200

    body = resp.json()
    assert body["status"] == "ok"
    assert body["service"] == "proximity-service"
    assert body["version"] == "1.0.0"
    assert isinstance(body["uptime"], int)


@pytest.mark.asyncio
async def test_status_reports_capabilities(client, broadcaster):
    await broadcaster.subscribe("c1")

    resp = await client.get("/api/proximity/status")
    assert resp.status_code == 200

    body = resp.json()
    assert body["capabilities"]["realtimeBroadcasting"] is True
    assert body["capabilities"]["ble"] is False
    assert body["gdpr"]["consentRequired"] is True
    assert body["defaults"] == {"maxRangeMeters": 5000, "bleRangeMeters": 30}
    assert body["broadcast"] == {"channels": 1, "subscribers": 1}


@pytest.mark.asyncio
async def test_openapi_manifest_lists_endpoints(client):
    resp = await client.get("/api/openapi.json")
    assert resp.status_code == 200

    spec = resp.json()
    assert spec["openapi"].startswith("3.0")
    assert spec["info"]["title"] == "Proximity Service"
    for path in (
        "/health",
        "/api/proximity/calculate",
        "/api/proximity/nearby",
        "/api/proximity/consent",
        "/api/proximity/broadcast",
        "/api/proximity/stream/{channelId}",
        "/api/proximity/channels",
    ):
        assert path in spec["paths"]
    assert "GeoPoint" in spec["components"]["schemas"]


@pytest.mark.asyncio
async def test_calculate_berlin_to_munich(client):
    resp = await client.post(
        "/api/proximity/calculate",
        json={"from": MY_POSITION, "to": {"lat": 48.1351, "lng": 11.582}},
    )
    assert resp.status_code == 200

    body = resp.json()
    assert 499_000 < body["distanceMeters"] < 510_000
    assert body["distanceLabel"].endswith("km")
    assert body["status"] == "out_of_range"
    assert body["from"] == MY_POSITION


@pytest.mark.asyncio
async def test_calculate_same_point(client):
    resp = await client.post("/api/proximity/calculate", json={"from": MY_POSITION, "to": MY_POSITION})

    body = resp.json()
    assert body["distanceMeters"] == 0
    assert body["distanceLabel"] == "0m"
    assert body["status"] == "nearby"


@pytest.mark.asyncio
async def test_calculate_rejects_missing_coordinates(client):
    resp = await client.post(
        "/api/proximity/calculate", json={"from": {"lat": 52.52}, "to": {"lat": 48.13}}
    )
    assert resp.status_code == 400
    assert "from.lng" in resp.json()["error"]


@pytest.mark.asyncio
async def test_nearby_filters_within_radius(client):
    resp = await client.post(
        "/api/proximity/nearby",
        json={"myPosition": MY_POSITION, "candidates": CANDIDATES, "maxRadiusMeters": 5000},
    )
    assert resp.status_code == 200

    body = resp.json()
    assert body["totalCandidates"] == 5
    assert body["count"] == 3
    assert body["maxRadiusMeters"] == 5000
    assert body["nearby"][0]["profileId"] == "very-close"
    assert {n["profileId"] for n in body["nearby"]} == {"close-1", "close-2", "very-close"}
    for entry in body["nearby"]:
        assert entry["status"] in ("nearby", "in_range", "out_of_range")
        assert entry["distanceLabel"]


@pytest.mark.asyncio
async def test_nearby_uses_default_radius(client):
    resp = await client.post(
        "/api/proximity/nearby", json={"myPosition": MY_POSITION, "candidates": CANDIDATES}
    )

    body = resp.json()
    assert body["maxRadiusMeters"] == 5000
    assert body["count"] == 3


@pytest.mark.asyncio
async def test_nearby_tight_radius(client):
    resp = await client.post(
        "/api/proximity/nearby",
        json={"myPosition": MY_POSITION, "candidates": CANDIDATES, "maxRadiusMeters": 500},
    )

    body = resp.json()
    assert body["count"] == 1
    assert body["nearby"][0]["profileId"] == "very-close"


@pytest.mark.asyncio
async def test_nearby_rejects_invalid_input(client):
    resp = await client.post(
        "/api/proximity/nearby", json={"myPosition": {"lat": 52.52}, "candidates": []}
    )
    assert resp.status_code == 400

    resp = await client.post("/api/proximity/nearby", json={"myPosition": MY_POSITION})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_consent_lifecycle(client):
    resp = await client.post(
        "/api/proximity/consent",
        json={"action": "create", "profileId": "user-1", "locationTracking": True},
    )
    assert resp.status_code == 200
    created = resp.json()
    assert created["valid"] is True
    assert created["consent"]["profileId"] == "user-1"
    assert created["consent"]["bleDiscovery"] is False
    assert "revokedAt" not in created["consent"]

    resp = await client.post(
        "/api/proximity/consent", json={"action": "validate", "consent": created["consent"]}
    )
    assert resp.json()["valid"] is True

    resp = await client.post(
        "/api/proximity/consent", json={"action": "revoke", "consent": created["consent"]}
    )
    revoked = resp.json()
    assert revoked["valid"] is False
    assert revoked["consent"]["revokedAt"]

    resp = await client.post(
        "/api/proximity/consent", json={"action": "validate", "consent": revoked["consent"]}
    )
    assert resp.json()["valid"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"action": "create"},
        {"action": "validate", "profileId": "user-1"},
        {"action": "revoke", "profileId": "user-1"},
        {"action": "delete", "profileId": "user-1"},
        {},
    ],
)
async def test_consent_rejects_bad_requests(client, body):
    resp = await client.post("/api/proximity/consent", json=body)
    assert resp.status_code == 400
    assert resp.json()["error"]
