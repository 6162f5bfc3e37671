"""
Foodbabes Backend: Shared Response Schemas
============================================

What:  Error and health response models shared by every router, and the
       helper that turns a pydantic ValidationError into the field-level
       `errors` map returned with 400 responses.

Errors Map Format:
    {
        "message": {
            "message": "String should have at least 5 characters",
            "kind": "string_too_short",
            "path": "message",
            "value": "hey"
        }
    }
    One entry per failing field; the first error wins when a field fails
    several checks.
"""

from typing import Any, Dict, Optional, Union

from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

# Leading loc parts that name where the value came from, not the field
REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _encode_value(value: Any) -> Any:
    try:
        return jsonable_encoder(value)
    except ValueError:
        # e.g. undecodable upload bytes
        return None


def field_errors(
    exc: Union[PydanticValidationError, RequestValidationError],
) -> Dict[str, Dict[str, Any]]:
    """Build the field-level errors map from a pydantic or FastAPI validation error."""
    errors: Dict[str, Dict[str, Any]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in REQUEST_LOCATIONS]
        path = ".".join(loc) or "body"
        if path in errors:
            continue
        errors[path] = {
            "message": err.get("msg", "Invalid value"),
            "kind": err.get("type", "invalid"),
            "path": path,
            # Missing fields report the whole payload as input; drop it
            "value": None if err.get("type") == "missing" else _encode_value(err.get("input")),
        }
    return errors


class ErrorResponse(BaseModel):
    """{message, errors} body of every 400 response."""
    message: str = Field(description="Human-readable error description")
    errors: Optional[Dict[str, Any]] = Field(default=None, description="Field-level errors")


class LoggedOutResponse(BaseModel):
    """401 body of the token authentication gate."""
    logged_out: bool = Field(default=True, serialization_alias="loggedOut")
    message: str = Field(default="Please try logging in again!")


class TokenErrorResponse(BaseModel):
    """403 body when the token lookup itself fails."""
    message: str
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancers.
    """
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    image_storage: str = Field(description="Image storage status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
