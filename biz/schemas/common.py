"""Common schemas used across the API."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format.

    Format: { "error": str, "code": str }

    `error` is the human-readable text clients display as-is; `code` is a
    stable machine-readable identifier.
    """

    error: str
    code: str
