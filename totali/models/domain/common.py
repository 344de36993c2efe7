# totali/models/domain/common.py
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SortOrder(str, Enum):
    """Common sort order options."""
    ASC = "asc"
    DESC = "desc"


class ApiResponse(CamelModel, Generic[T]):
    """Envelope wrapping every API response."""
    success: bool
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None


def success_response(data: T, message: Optional[str] = None) -> ApiResponse[T]:
    return ApiResponse(success=True, data=data, message=message)


def error_body(error: str, message: Optional[str] = None) -> dict:
    """JSON body for a failed request."""
    return ApiResponse(success=False, error=error, message=message).model_dump(
        by_alias=True, exclude_none=True
    )
