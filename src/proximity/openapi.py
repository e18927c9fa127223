"""Hand-maintained OpenAPI manifest served at /api/openapi.json."""

SERVICE_NAME = "proximity-service"
SERVICE_VERSION = "1.0.0"


def _json(schema: dict) -> dict:
    return {"application/json": {"schema": schema}}


def _ref(name: str) -> dict:
    return {"$ref": f"#/components/schemas/{name}"}


_ERROR = {
    "description": "Invalid input",
    "content": _json({"type": "object", "properties": {"error": {"type": "string"}}}),
}

_UNAUTHORIZED = {
    "description": "Missing or invalid API key",
    "content": _json({"type": "object", "properties": {"error": {"type": "string"}}}),
}

STATUS_ENUM = ["nearby", "in_range", "out_of_range"]

OPENAPI_SPEC = {
    "openapi": "3.0.3",
    "info": {
        "title": "Proximity Service",
        "version": SERVICE_VERSION,
        "description": (
            "Consent-based GPS + BLE proximity detection microservice. "
            "Provides distance calculation, nearby filtering, GDPR-compliant consent "
            "management and real-time position broadcasting over Server-Sent Events."
        ),
    },
    "servers": [
        {"url": "http://localhost:3000", "description": "Local development"},
    ],
    "components": {
        "securitySchemes": {
            "ApiKeyHeader": {"type": "apiKey", "in": "header", "name": "X-API-Key"},
            "ApiKeyQuery": {"type": "apiKey", "in": "query", "name": "api_key"},
        },
        "schemas": {
            "GeoPoint": {
                "type": "object",
                "required": ["lat", "lng"],
                "properties": {
                    "lat": {"type": "number", "minimum": -90, "maximum": 90, "example": 52.52},
                    "lng": {"type": "number", "minimum": -180, "maximum": 180, "example": 13.405},
                },
            },
            "ProfileLocation": {
                "type": "object",
                "required": ["profileId", "location"],
                "properties": {
                    "profileId": {"type": "string"},
                    "location": _ref("GeoPoint"),
                },
            },
            "PresenceRecord": {
                "type": "object",
                "properties": {
                    "profileId": {"type": "string"},
                    "location": _ref("GeoPoint"),
                    "distanceMeters": {"type": "number"},
                    "distanceLabel": {"type": "string"},
                    "status": {"type": "string", "enum": STATUS_ENUM},
                },
            },
            "LocationConsent": {
                "type": "object",
                "required": ["profileId", "grantedAt"],
                "properties": {
                    "profileId": {"type": "string"},
                    "locationTracking": {"type": "boolean"},
                    "bleDiscovery": {"type": "boolean"},
                    "grantedAt": {"type": "string", "format": "date-time"},
                    "revokedAt": {"type": "string", "format": "date-time"},
                },
            },
            "BroadcastEvent": {
                "type": "object",
                "properties": {
                    "profileId": {"type": "string"},
                    "location": _ref("GeoPoint"),
                    "timestamp": {"type": "string", "format": "date-time"},
                    "metadata": {"type": "object", "additionalProperties": True},
                },
            },
            "ChannelInfo": {
                "type": "object",
                "properties": {
                    "channelId": {"type": "string"},
                    "subscriberCount": {"type": "integer"},
                },
            },
        },
    },
    "security": [{"ApiKeyHeader": []}, {"ApiKeyQuery": []}],
    "paths": {
        "/health": {
            "get": {
                "summary": "Health check",
                "operationId": "healthCheck",
                "security": [],
                "responses": {
                    "200": {
                        "description": "Service is healthy",
                        "content": _json(
                            {
                                "type": "object",
                                "properties": {
                                    "status": {"type": "string", "example": "ok"},
                                    "service": {"type": "string", "example": SERVICE_NAME},
                                    "version": {"type": "string", "example": SERVICE_VERSION},
                                    "uptime": {"type": "number"},
                                },
                            }
                        ),
                    }
                },
            }
        },
        "/api/proximity/status": {
            "get": {
                "summary": "Service capabilities and defaults",
                "operationId": "getStatus",
                "responses": {"200": {"description": "Capabilities"}, "401": _UNAUTHORIZED},
            }
        },
        "/api/proximity/calculate": {
            "post": {
                "summary": "Calculate distance between two GeoPoints",
                "operationId": "calculateDistance",
                "requestBody": {
                    "required": True,
                    "content": _json(
                        {
                            "type": "object",
                            "required": ["from", "to"],
                            "properties": {"from": _ref("GeoPoint"), "to": _ref("GeoPoint")},
                        }
                    ),
                },
                "responses": {
                    "200": {
                        "description": "Distance calculated",
                        "content": _json(
                            {
                                "type": "object",
                                "properties": {
                                    "distanceMeters": {"type": "number"},
                                    "distanceLabel": {"type": "string"},
                                    "status": {"type": "string", "enum": STATUS_ENUM},
                                },
                            }
                        ),
                    },
                    "400": _ERROR,
                    "401": _UNAUTHORIZED,
                },
            }
        },
        "/api/proximity/nearby": {
            "post": {
                "summary": "Find nearby profiles from a candidate list",
                "operationId": "findNearby",
                "requestBody": {
                    "required": True,
                    "content": _json(
                        {
                            "type": "object",
                            "required": ["myPosition", "candidates"],
                            "properties": {
                                "myPosition": _ref("GeoPoint"),
                                "candidates": {"type": "array", "items": _ref("ProfileLocation")},
                                "maxRadiusMeters": {"type": "number", "default": 5000},
                            },
                        }
                    ),
                },
                "responses": {
                    "200": {
                        "description": "Nearby profiles sorted by distance",
                        "content": _json(
                            {
                                "type": "object",
                                "properties": {
                                    "nearby": {"type": "array", "items": _ref("PresenceRecord")},
                                    "count": {"type": "number"},
                                    "totalCandidates": {"type": "number"},
                                    "maxRadiusMeters": {"type": "number"},
                                },
                            }
                        ),
                    },
                    "400": _ERROR,
                    "401": _UNAUTHORIZED,
                },
            }
        },
        "/api/proximity/consent": {
            "post": {
                "summary": "Create, validate, or revoke a LocationConsent",
                "operationId": "manageConsent",
                "requestBody": {
                    "required": True,
                    "content": _json(
                        {
                            "type": "object",
                            "required": ["action"],
                            "properties": {
                                "action": {"type": "string", "enum": ["create", "validate", "revoke"]},
                                "profileId": {"type": "string"},
                                "locationTracking": {"type": "boolean"},
                                "bleDiscovery": {"type": "boolean"},
                                "consent": _ref("LocationConsent"),
                            },
                        }
                    ),
                },
                "responses": {
                    "200": {"description": "Consent operation result"},
                    "400": _ERROR,
                    "401": _UNAUTHORIZED,
                },
            }
        },
        "/api/proximity/broadcast": {
            "post": {
                "summary": "Publish a position update to a channel",
                "operationId": "broadcastPosition",
                "requestBody": {
                    "required": True,
                    "content": _json(
                        {
                            "type": "object",
                            "required": ["channelId", "profileId", "location"],
                            "properties": {
                                "channelId": {"type": "string"},
                                "profileId": {"type": "string"},
                                "location": _ref("GeoPoint"),
                                "metadata": {"type": "object", "additionalProperties": True},
                            },
                        }
                    ),
                },
                "responses": {
                    "200": {
                        "description": "Published; subscriberCount is the number listening at publish time",
                        "content": _json(
                            {
                                "type": "object",
                                "properties": {
                                    "published": {"type": "boolean"},
                                    "channelId": {"type": "string"},
                                    "subscriberCount": {"type": "integer"},
                                },
                            }
                        ),
                    },
                    "400": _ERROR,
                    "401": _UNAUTHORIZED,
                },
            }
        },
        "/api/proximity/stream/{channelId}": {
            "get": {
                "summary": "Subscribe to position events on a channel (Server-Sent Events)",
                "operationId": "streamChannel",
                "parameters": [
                    {"name": "channelId", "in": "path", "required": True, "schema": {"type": "string"}}
                ],
                "responses": {
                    "200": {
                        "description": (
                            "Event stream. First frame is `connected`, then one `position` "
                            "frame per published BroadcastEvent."
                        ),
                        "content": {"text/event-stream": {"schema": {"type": "string"}}},
                    },
                    "401": _UNAUTHORIZED,
                },
            }
        },
        "/api/proximity/channels": {
            "get": {
                "summary": "List active channels",
                "operationId": "listChannels",
                "responses": {
                    "200": {
                        "description": "Active channels and their subscriber counts",
                        "content": _json(
                            {
                                "type": "object",
                                "properties": {
                                    "channels": {"type": "array", "items": _ref("ChannelInfo")},
                                    "total": {"type": "integer"},
                                },
                            }
                        ),
                    },
                    "401": _UNAUTHORIZED,
                },
            }
        },
    },
}
