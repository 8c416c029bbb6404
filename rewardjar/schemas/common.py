# rewardjar/schemas/common.py
"""
Shared schema pieces: camelCase wire naming and the response envelope.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire; both accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """
    Envelope returned by every endpoint.

    Failures carry `error` and never `data`; routes serialize with
    exclude_none so absent fields are omitted.
    """
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None


def ok(data=None, message: Optional[str] = None) -> ApiResponse:
    return ApiResponse(success=True, data=data, message=message)


def failure(error: str) -> ApiResponse:
    return ApiResponse(success=False, error=error)
