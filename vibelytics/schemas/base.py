"""
Base Pydantic schemas.

This module contains base schemas with common fields and configurations
that other schemas can inherit from, plus the response envelope.
"""

from datetime import datetime
from typing import Annotated, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from vibelytics.utils.dates import as_utc

DataT = TypeVar("DataT")

# Datetimes leave the API as aware UTC values whatever the backend returned.
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    Fields are exposed in camelCase; snake_case is accepted on input too.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TimestampSchema(BaseSchema):
    """
    Schema with timestamp fields.
    """

    created_at: UTCDateTime
    updated_at: UTCDateTime


class IDSchema(BaseSchema):
    """
    Schema with ID field.
    """

    id: int


class DataResponse(BaseSchema, Generic[DataT]):
    """Standard ``{success, message?, data}`` envelope."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class ListResponse(BaseSchema, Generic[DataT]):
    """Envelope for list results with their length."""

    success: bool = True
    data: List[DataT]
    count: int
