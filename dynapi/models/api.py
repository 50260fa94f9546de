"""API payload models"""

from pydantic import BaseModel, Field


class ProblemResponse(BaseModel):
    """Problem payload returned when an operation fails.

    Attributes:
        status: HTTP status code of the response
        detail: Human readable description of the failure
    """
    status: int = Field(..., ge=100, le=599)
    detail: str
