"""RFC 7807 problem response model."""

from pydantic import BaseModel, Field


class ProblemDetail(BaseModel):
    """RFC 7807 error body returned by every case endpoint.

    Attributes:
        type: URI identifying the problem type.
        title: Short human-readable summary.
        status: HTTP status code.
        detail: Explanation specific to this occurrence.
        instance: Request URL.
        code: Stable domain error code (e.g. INVALID_TRANSITION).
    """

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str = Field(default="ERROR")
