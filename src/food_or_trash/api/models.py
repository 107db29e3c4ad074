"""Request models for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field


class ItemRequest(BaseModel):
    """Free-text item submitted for checking or classification."""

    item: str | None = None


class IdentifyRequest(BaseModel):
    """Base64 image submitted for identification."""

    model_config = ConfigDict(populate_by_name=True)

    image: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")
