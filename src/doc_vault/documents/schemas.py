"""Pydantic schemas for the JSON envelopes the API returns."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer

T = TypeVar("T")


def to_utc_iso(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix.

    SQLite hands timestamps back naive; they were written as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class DocumentRead(BaseModel):
    """One ``documents`` row as the API exposes it."""

    id: int
    filename: str = Field(validation_alias=AliasChoices("filename", "stored_name"))
    original_name: str = Field(
        validation_alias=AliasChoices("originalName", "original_name"),
        serialization_alias="originalName",
    )
    file_size: int = Field(
        validation_alias=AliasChoices("fileSize", "file_size"),
        serialization_alias="fileSize",
    )
    upload_date: datetime = Field(
        validation_alias=AliasChoices("uploadDate", "upload_date"),
        serialization_alias="uploadDate",
    )

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @field_serializer("upload_date")
    def _serialize_upload_date(self, value: datetime) -> str:
        return to_utc_iso(value)


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str


class HealthEnvelope(BaseModel):
    success: bool = True
    message: str = "Server is running"
    timestamp: str


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
