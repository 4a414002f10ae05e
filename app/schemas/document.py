"""
DocStore API — Pydantic Request/Response Schemas
=================================================

What:  Pydantic models for the few non-document payloads the API exchanges.
How:   FastAPI uses them to parse request bodies, serialize responses,
       and generate OpenAPI documentation.

Documents themselves have no schema: they travel as Dict[str, Any].
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class QueryRequest(BaseModel):
    """
    Body of POST /users/query.

    `value` is passed to Firestore as-is, so JSON numbers, booleans, lists
    and nulls keep their types (query strings could not carry them).
    """
    field: str = Field(description="Field path to filter on, e.g. 'age' or 'address.city'")
    operator: str = Field(
        description="Firestore comparison: ==, !=, <, <=, >, >=, in, not-in, "
                    "array-contains, array-contains-any (array_contains and "
                    "array_contains_any are also accepted)",
        examples=["=="],
    )
    value: Any = Field(default=None, description="Value to compare against")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class DeleteResponse(BaseModel):
    """Returned by DELETE /users/{id}."""
    message: str = Field(description="Human-readable confirmation")
    id: str = Field(description="ID of the deleted document")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "document with ID 'abc' was not found",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    firestore: str = Field(description="Firestore status: connected, disconnected, not_initialized")
    credential_source: Optional[str] = Field(
        default=None,
        description="Credential strategy used at startup",
    )
    uptime_seconds: float = Field(description="Seconds since service started")
