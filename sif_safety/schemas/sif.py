"""SIF schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from sif_safety.models.enums import ContentVisibility


class SifCreate(BaseModel):
    subject: str = Field(min_length=1, max_length=200)
    message: str = Field(default="", max_length=5000)


class SifResponse(BaseModel):
    id: int
    author_id: int
    subject: str
    message: str
    is_removed: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class SifVisibilityResponse(BaseModel):
    sif_id: int
    visibility: ContentVisibility
