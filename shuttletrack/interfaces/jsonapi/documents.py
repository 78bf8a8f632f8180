"""
Pydantic models for JSON:API documents.

These models define the wire contract exchanged with clients.
No business logic belongs here.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

CONTENT_TYPE = "application/vnd.api+json"
CURRENT_VERSION = "1.0"
BUS_TYPE = "bus"


class Root(BaseModel):
    """Top-level ``jsonapi`` member declaring the protocol version."""

    version: str = ""


class Links(BaseModel):
    """Links attached to a document or resource."""

    model_config = ConfigDict(populate_by_name=True)

    self_link: str = Field(alias="self")


class BusAttributes(BaseModel):
    """Attributes of a bus resource.

    Every attribute is optional on input. Coordinates must be finite.
    Naive timestamps are read as UTC.
    """

    latitude: Optional[float] = Field(default=None, allow_inf_nan=False)
    longitude: Optional[float] = Field(default=None, allow_inf_nan=False)
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    updated_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("updated_at", "updatedAt")
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class BusData(BaseModel):
    """A single bus resource object."""

    type: str = ""
    id: str = ""
    attributes: Optional[BusAttributes] = None
    links: Optional[Links] = None


class BusDocument(BaseModel):
    """Document carrying a single bus."""

    jsonapi: Optional[Root] = None
    data: BusData
    links: Optional[Links] = None


class BusesDocument(BaseModel):
    """Document carrying a collection of buses."""

    jsonapi: Optional[Root] = None
    data: list[BusData] = Field(default_factory=list)
    links: Optional[Links] = None


class ErrorSource(BaseModel):
    """Reference to the part of the request that caused an error."""

    pointer: Optional[str] = None
    parameter: Optional[str] = None


class ErrorData(BaseModel):
    """A single error object."""

    id: Optional[str] = None
    status: str
    code: Optional[str] = None
    title: Optional[str] = None
    detail: Optional[str] = None
    source: Optional[ErrorSource] = None


class ErrorsDocument(BaseModel):
    """Document carrying one or more errors."""

    jsonapi: Optional[Root] = None
    errors: list[ErrorData]
