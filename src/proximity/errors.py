from air.responses import JSONResponse
from fastapi import Request
from pydantic import ValidationError


class ProximityError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(ProximityError):
    status_code = 400

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "InvalidInput":
        """Builds a single message naming each offending field by its wire name."""
        parts = []
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            if field:
                parts.append(f'"{field}": {error["msg"]}')
            else:
                parts.append(error["msg"])
        return cls("; ".join(parts) or "Invalid request body")


async def proximity_error_handler(request: Request, exc: ProximityError):
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)
