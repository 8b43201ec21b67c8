"""Report schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from sif_safety.core.moderation_policies import MAX_REASON_LENGTH
from sif_safety.models.enums import ModerationAction, ReportCategory, ReportStatus


class ReportCreate(BaseModel):
    content_id: int
    category: ReportCategory
    reason: str | None = Field(default=None, max_length=MAX_REASON_LENGTH)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class ReportResponse(BaseModel):
    id: int
    reporter_id: int
    reported_content_id: int
    reported_user_id: int
    category: ReportCategory
    reason: str | None
    status: ReportStatus
    moderator_id: int | None = None
    moderator_notes: str | None = None
    action_taken: ModerationAction | None = None
    resolved_date: datetime | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ReportStatusUpdate(BaseModel):
    status: ReportStatus
    action: ModerationAction | None = None
    moderator_notes: str | None = Field(default=None, max_length=2000)


class ReportCheckResponse(BaseModel):
    content_id: int
    reported: bool


class ContentReportStats(BaseModel):
    content_id: int
    total_reports: int
    pending_reports: int
    reason_breakdown: dict[ReportCategory, int]
    most_recent_report: datetime | None = None
