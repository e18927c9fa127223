from datetime import datetime
from datetime import timezone
import json
import math
from typing import Any
from typing import TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError

from proximity.errors import InvalidInput

ModelT = TypeVar("ModelT", bound=BaseModel)

KEEPALIVE_FRAME = b": ping\n\n"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T10:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def dump_json(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def sse_frame(event: str, payload: Any) -> bytes:
    return f"event: {event}\ndata: {dump_json(payload)}\n\n".encode("utf-8")


async def read_model(request: Request, model: type[ModelT]) -> ModelT:
    try:
        data = await request.json()
    except ValueError:
        raise InvalidInput("Request body must be valid JSON")
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidInput.from_validation_error(e)
